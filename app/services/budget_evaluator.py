"""
Budget Evaluator
Classifies budget progress into warning tiers and builds warning records
for transactions that push spending past configured thresholds
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from app.config import settings

Number = Union[Decimal, int, float, str]

HUNDRED = Decimal("100")


class WarningLevel(Enum):
    NORMAL = "Normal"
    WARNING = "Warning"
    CRITICAL = "Critical"
    EXCEEDED = "Exceeded"


# Dashboard wording and colours for each tier
STATUS_LABELS = {
    WarningLevel.NORMAL: "Good",
    WarningLevel.WARNING: "Warning",
    WarningLevel.CRITICAL: "Critical",
    WarningLevel.EXCEEDED: "Exceeded",
}

STATUS_COLORS = {
    WarningLevel.NORMAL: "#22c55e",
    WarningLevel.WARNING: "#eab308",
    WarningLevel.CRITICAL: "#f97316",
    WarningLevel.EXCEEDED: "#ef4444",
}


@dataclass
class BudgetWarning:
    budget_id: Optional[int]
    category_name: str
    budget_amount: Decimal
    current_spent: Decimal
    new_spent: Decimal
    progress_percentage: Decimal
    warning_level: WarningLevel
    message: str
    overage: Optional[Decimal] = None


def to_decimal(value: Number) -> Decimal:
    """Convert floats through their string form so 0.1 stays 0.1"""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def progress_percentage(spent: Number, amount: Number) -> Decimal:
    """Spent as a percentage of the budget amount; 0 for a zero budget"""
    amount = to_decimal(amount)
    if amount <= 0:
        return Decimal("0")
    return to_decimal(spent) / amount * HUNDRED


def classify_progress(
    percentage: Number,
    notification_threshold: Number = None,
    warning_percent: Number = None,
) -> WarningLevel:
    """
    Pick the warning tier for a progress percentage

    Tiers are checked from high to low and the first match wins:
    Exceeded (>= 100), Critical (>= threshold), Warning (>= 80), Normal.
    """
    if notification_threshold is None:
        notification_threshold = settings.DEFAULT_NOTIFICATION_THRESHOLD
    if warning_percent is None:
        warning_percent = settings.BUDGET_WARNING_PERCENT

    percentage = to_decimal(percentage)

    if percentage >= HUNDRED:
        return WarningLevel.EXCEEDED
    if percentage >= to_decimal(notification_threshold):
        return WarningLevel.CRITICAL
    if percentage >= to_decimal(warning_percent):
        return WarningLevel.WARNING
    return WarningLevel.NORMAL


def _format_money(value: Decimal) -> str:
    return f"{value:,.0f}"


def evaluate_budget(
    budget_amount: Number,
    current_spent: Number,
    transaction_amount: Number,
    notification_threshold: Number = None,
    category_name: str = "",
    budget_id: Optional[int] = None,
) -> Optional[BudgetWarning]:
    """
    Evaluate the effect of a new expense on a budget

    Returns:
        A BudgetWarning for the Warning, Critical and Exceeded tiers,
        None when spending stays in the Normal tier
    """
    if notification_threshold is None:
        notification_threshold = settings.DEFAULT_NOTIFICATION_THRESHOLD

    amount = to_decimal(budget_amount)
    spent = to_decimal(current_spent)
    new_spent = spent + to_decimal(transaction_amount)
    percentage = progress_percentage(new_spent, amount)
    level = classify_progress(percentage, notification_threshold)

    if level == WarningLevel.NORMAL:
        return None

    label = category_name or "this category"
    overage = None

    if level == WarningLevel.EXCEEDED:
        overage = new_spent - amount
        message = f"Budget for {label} exceeded by {_format_money(overage)} ({percentage:.1f}% used)"
    elif level == WarningLevel.CRITICAL:
        message = (
            f"You have used {percentage:.1f}% of your {label} budget, "
            f"past the {to_decimal(notification_threshold):.0f}% alert threshold"
        )
    else:
        message = f"You have used {percentage:.1f}% of your {label} budget"

    return BudgetWarning(
        budget_id=budget_id,
        category_name=category_name,
        budget_amount=amount,
        current_spent=spent,
        new_spent=new_spent,
        progress_percentage=percentage.quantize(Decimal("0.01")),
        warning_level=level,
        message=message,
        overage=overage,
    )
