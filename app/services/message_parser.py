"""
Message Parser for chat-entered transactions
Understands short Vietnamese and English messages such as
"cà phê 25k", "lương tháng 15tr" or "hôm nay tiêu bao nhiêu?"
"""

import logging
import re
import unicodedata
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class TransactionType(Enum):
    INCOME = "income"
    EXPENSE = "expense"


class QueryIntent(Enum):
    SPENT_TODAY = "spent_today"
    SPENT_WEEK = "spent_week"
    SPENT_MONTH = "spent_month"
    INCOME_MONTH = "income_month"
    BALANCE = "balance"
    TOP_CATEGORY = "top_category"


UNIT_MULTIPLIERS = {
    'k': Decimal("1000"),
    'nghìn': Decimal("1000"),
    'ngàn': Decimal("1000"),
    'tr': Decimal("1000000"),
    'triệu': Decimal("1000000"),
    'củ': Decimal("1000000"),
    'm': Decimal("1000000"),
}

# Category names match the seeded default categories
CATEGORY_KEYWORDS = {
    'expense': {
        'Food & Drinks': [
            'ăn', 'ăn sáng', 'ăn trưa', 'ăn tối', 'cơm', 'phở', 'bún', 'bánh mì',
            'cà phê', 'cafe', 'coffee', 'trà sữa', 'nhậu', 'uống',
            'food', 'lunch', 'dinner', 'breakfast', 'restaurant', 'snack',
        ],
        'Transport': [
            'xăng', 'grab', 'taxi', 'xe ôm', 'gửi xe', 'vé xe', 'vé tàu', 'xe buýt',
            'uber', 'bus', 'fuel', 'parking', 'train',
        ],
        'Shopping': [
            'mua sắm', 'quần áo', 'giày', 'shopee', 'lazada', 'tiki',
            'shopping', 'clothes', 'shoes',
        ],
        'Entertainment': [
            'xem phim', 'phim', 'karaoke', 'du lịch', 'game',
            'movie', 'cinema', 'netflix', 'spotify', 'concert',
        ],
        'Bills & Utilities': [
            'tiền điện', 'tiền nước', 'điện', 'internet', 'wifi', 'tiền nhà',
            'thuê nhà', 'điện thoại', 'rent', 'bill', 'electricity', 'water bill',
        ],
        'Health': [
            'thuốc', 'bệnh viện', 'khám', 'nha khoa', 'gym',
            'medicine', 'pharmacy', 'doctor', 'hospital', 'dentist',
        ],
        'Education': [
            'học phí', 'khóa học', 'sách', 'học', 'tuition', 'course', 'book', 'school',
        ],
    },
    'income': {
        'Salary': ['lương', 'salary', 'payroll', 'wage'],
        'Bonus': ['thưởng', 'bonus', 'tip'],
    },
}

INCOME_KEYWORDS = [
    'lương', 'nhận', 'thưởng', 'thu nhập', 'thu', 'được cho', 'hoàn tiền', 'bán',
    'salary', 'received', 'receive', 'income', 'bonus', 'earned', 'refund', 'sold',
]

INTENT_KEYWORDS = [
    (QueryIntent.BALANCE, ['số dư', 'còn bao nhiêu tiền', 'balance']),
    (QueryIntent.TOP_CATEGORY, ['nhiều nhất', 'top category', 'most on']),
    (QueryIntent.INCOME_MONTH, ['thu nhập', 'kiếm được', 'income', 'earned']),
    (QueryIntent.SPENT_TODAY, ['hôm nay', 'today']),
    (QueryIntent.SPENT_WEEK, ['tuần này', 'this week']),
    (QueryIntent.SPENT_MONTH, ['tháng này', 'this month']),
]

QUESTION_MARKERS = ['bao nhiêu', 'how much', 'what', 'mấy', '?']


def _keyword_regex(keywords) -> re.Pattern:
    alternatives = sorted(keywords, key=len, reverse=True)
    return re.compile(r'(?<!\w)(?:' + '|'.join(re.escape(k) for k in alternatives) + r')(?!\w)', re.IGNORECASE)


class MessageParser:
    """
    Best-effort parser turning a chat message into transaction fields or a
    query intent
    """

    def __init__(self):
        self.patterns = self._compile_patterns()

    def _compile_patterns(self) -> Dict:
        """
        Compile regex patterns used by the extractors
        """
        units = sorted(UNIT_MULTIPLIERS, key=len, reverse=True)
        compiled = {
            # 25000, 25.000, 25k, 150 nghìn, 1.5tr, 2 triệu, 30000đ
            'amount': re.compile(
                r'(?<![\w.,])(\d+(?:[.,]\d+)*)\s*(' + '|'.join(re.escape(u) for u in units) + r')?'
                r'\s*(?:đồng|vnđ|vnd|đ)?(?![^\W\d_])',
                re.IGNORECASE
            ),
            'thousands': re.compile(r'^\d{1,3}(?:[.,]\d{3})+$'),
            'income': _keyword_regex(INCOME_KEYWORDS),
            'question': _keyword_regex([m for m in QUESTION_MARKERS if m != '?']),
            'whitespace': re.compile(r'\s+'),
        }

        compiled['categories'] = {
            transaction_type: {
                name: [re.compile(r'(?<!\w)' + re.escape(k) + r'(?!\w)', re.IGNORECASE) for k in keywords]
                for name, keywords in table.items()
            }
            for transaction_type, table in CATEGORY_KEYWORDS.items()
        }

        compiled['intents'] = [
            (intent, _keyword_regex(keywords)) for intent, keywords in INTENT_KEYWORDS
        ]

        return compiled

    def _to_decimal(self, number: str, unit: Optional[str]) -> Optional[Decimal]:
        if unit:
            normalized = number.replace(',', '.')
            if normalized.count('.') > 1:
                normalized = normalized.replace('.', '')
        elif self.patterns['thousands'].match(number):
            normalized = number.replace('.', '').replace(',', '')
        else:
            normalized = number.replace(',', '.')

        try:
            value = Decimal(normalized)
        except InvalidOperation:
            return None

        if unit:
            value *= UNIT_MULTIPLIERS[unit.lower()]
        return value

    def _extract_amount(self, text: str) -> Tuple[Optional[Decimal], Optional[Tuple[int, int]]]:
        """
        Amount and its span in the text

        A number written with a unit ("25k") wins over a bare number
        ("2 ly"), otherwise the first number is used.
        """
        first = None
        for match in self.patterns['amount'].finditer(text):
            value = self._to_decimal(match.group(1), match.group(2))
            if value is None or value <= 0:
                continue
            if match.group(2):
                return value, match.span()
            if first is None:
                first = (value, match.span())

        return first if first else (None, None)

    def _detect_transaction_type(self, text: str) -> Tuple[TransactionType, bool]:
        """Type and whether a keyword decided it (expense is the default)"""
        if self.patterns['income'].search(text):
            return TransactionType.INCOME, True
        return TransactionType.EXPENSE, False

    def _extract_category(self, text: str, transaction_type: TransactionType) -> Optional[str]:
        """Category whose longest keyword occurs in the text"""
        best, best_length = None, 0
        for name, patterns in self.patterns['categories'].get(transaction_type.value, {}).items():
            for pattern in patterns:
                match = pattern.search(text)
                if match and len(match.group(0)) > best_length:
                    best, best_length = name, len(match.group(0))
        return best

    def _extract_intent(self, text: str) -> Optional[QueryIntent]:
        for intent, pattern in self.patterns['intents']:
            if pattern.search(text):
                return intent
        return None

    def _is_question(self, text: str) -> bool:
        return '?' in text or bool(self.patterns['question'].search(text))

    def _clean_description(self, text: str, span: Optional[Tuple[int, int]]) -> str:
        if span:
            text = text[:span[0]] + ' ' + text[span[1]:]
        text = self.patterns['whitespace'].sub(' ', text).strip(' ,.-:')
        return text

    def parse(self, message: str) -> Dict:
        """
        Parse a chat message

        Returns:
            Dictionary with ``amount`` (Decimal), ``transaction_type``,
            ``category``, ``description``, ``intent`` (QueryIntent value for
            questions), ``parsed_successfully`` and ``confidence``
        """
        text = unicodedata.normalize("NFC", message or "").strip()

        result = {
            'raw_message': message,
            'amount': None,
            'transaction_type': None,
            'category': None,
            'description': None,
            'intent': None,
            'parsed_successfully': False,
            'confidence': 0.0
        }

        if not text:
            return result

        amount, span = self._extract_amount(text)

        # Questions are answered, not recorded
        if amount is None or self._is_question(text):
            intent = self._extract_intent(text)
            if intent:
                result['intent'] = intent.value
                result['parsed_successfully'] = True
                result['confidence'] = 1.0
                return result

        if amount is None:
            logger.debug("No amount found in message: %r", text)
            return result

        result['amount'] = amount
        result['parsed_successfully'] = True
        result['confidence'] += 0.5

        trans_type, by_keyword = self._detect_transaction_type(text)
        result['transaction_type'] = trans_type.value
        if by_keyword:
            result['confidence'] += 0.2

        category = self._extract_category(text, trans_type)
        if category:
            result['category'] = category
            result['confidence'] += 0.3

        result['description'] = self._clean_description(text, span) or category or text

        result['confidence'] = min(result['confidence'], 1.0)
        return result
