"""Business unit and payment method enumerations."""

from enum import Enum


class BusinessUnit(Enum):
    """Operating segment a row of money belongs to."""

    HOTEL = "hotel"
    RESTAURANT = "restaurant"
    SPA = "spa"
    POOL = "pool"
    BAR = "bar"


class PaymentMethod(Enum):
    """How an expense was paid, i.e. which expense sheet it came from."""

    CASH = "cash"  # "наличные" sheet
    ACCOUNT = "account"  # "Счет" sheet


# Each expense sheet carries exactly one payment method
SheetType = PaymentMethod
