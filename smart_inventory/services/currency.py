from dataclasses import dataclass

from smart_inventory.errors import ValidationError


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str


CURRENCIES = [
    Currency("USD", "$", "US Dollar"),
    Currency("EUR", "€", "Euro"),
    Currency("GBP", "£", "British Pound"),
    Currency("JPY", "¥", "Japanese Yen"),
    Currency("AUD", "A$", "Australian Dollar"),
    Currency("CAD", "C$", "Canadian Dollar"),
    Currency("CHF", "Fr", "Swiss Franc"),
    Currency("CNY", "¥", "Chinese Yuan"),
    Currency("SEK", "kr", "Swedish Krona"),
    Currency("NZD", "NZ$", "New Zealand Dollar"),
    Currency("MXN", "$", "Mexican Peso"),
    Currency("SGD", "S$", "Singapore Dollar"),
    Currency("HKD", "HK$", "Hong Kong Dollar"),
    Currency("NOK", "kr", "Norwegian Krone"),
    Currency("KRW", "₩", "South Korean Won"),
    Currency("TRY", "₺", "Turkish Lira"),
    Currency("RUB", "₽", "Russian Ruble"),
    Currency("INR", "₹", "Indian Rupee"),
    Currency("BRL", "R$", "Brazilian Real"),
    Currency("ZAR", "R", "South African Rand"),
]

_BY_CODE = {c.code: c for c in CURRENCIES}


def find_currency(code: str) -> Currency:
    """Look up a currency by ISO code, falling back to USD."""
    return _BY_CODE.get((code or "").upper(), _BY_CODE["USD"])


def require_currency(code: str) -> Currency:
    currency = _BY_CODE.get((code or "").strip().upper())
    if currency is None:
        raise ValidationError(f"Unknown currency code: {code!r}")
    return currency


class CurrencyFormatter:
    """Display-only money formatting; no conversion happens here."""

    def __init__(self, code: str = "USD"):
        self.currency = find_currency(code)

    def format_price(self, amount: float) -> str:
        return f"{self.currency.symbol}{amount:.2f}"
