"""
Answers the spending questions recognised by the message parser
"""

from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.datetime_utils import day_range, month_bounds
from app.services.dashboard_service import DashboardService
from app.services.message_parser import QueryIntent

MESSAGES = {
    'vi': {
        QueryIntent.SPENT_TODAY: "Hôm nay bạn đã chi {amount}.",
        QueryIntent.SPENT_WEEK: "Tuần này bạn đã chi {amount}.",
        QueryIntent.SPENT_MONTH: "Tháng này bạn đã chi {amount}.",
        QueryIntent.INCOME_MONTH: "Thu nhập tháng này của bạn là {amount}.",
        QueryIntent.BALANCE: "Tổng số dư các tài khoản: {amount}.",
        QueryIntent.TOP_CATEGORY: "Tháng này bạn chi nhiều nhất cho {category}: {amount}.",
        'no_spending': "Tháng này bạn chưa có khoản chi nào.",
    },
    'en': {
        QueryIntent.SPENT_TODAY: "You have spent {amount} today.",
        QueryIntent.SPENT_WEEK: "You have spent {amount} this week.",
        QueryIntent.SPENT_MONTH: "You have spent {amount} this month.",
        QueryIntent.INCOME_MONTH: "Your income this month is {amount}.",
        QueryIntent.BALANCE: "Total balance across your accounts: {amount}.",
        QueryIntent.TOP_CATEGORY: "Your top category this month is {category}: {amount}.",
        'no_spending': "You have no expenses this month yet.",
    },
}


def format_money(amount) -> str:
    return f"{amount:,.0f}đ"


class QueryService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.dashboard = DashboardService(db)

    async def answer(self, user_id: int, intent: QueryIntent, language: str = "vi") -> str:
        texts = MESSAGES.get(language, MESSAGES['vi'])
        today = date.today()

        if intent == QueryIntent.BALANCE:
            summary = await self.dashboard.get_financial_summary(user_id)
            return texts[intent].format(amount=format_money(summary['total_balance']))

        if intent == QueryIntent.TOP_CATEGORY:
            top = await self.dashboard.get_top_categories(user_id, months=1)
            if not top:
                return texts['no_spending']
            return texts[intent].format(category=top[0]['category_name'], amount=format_money(top[0]['amount']))

        if intent == QueryIntent.SPENT_TODAY:
            lower, upper = day_range(today, today)
        elif intent == QueryIntent.SPENT_WEEK:
            lower, upper = day_range(today - timedelta(days=today.weekday()), today)
        else:
            lower, upper = day_range(*month_bounds(today))

        income, expense, _ = await self.dashboard._totals(user_id, lower, upper)
        amount = income if intent == QueryIntent.INCOME_MONTH else expense
        return texts[intent].format(amount=format_money(amount))
