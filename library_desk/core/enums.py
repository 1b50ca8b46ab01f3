from enum import Enum


class PaymentMethod(str, Enum):
    CASH = "Cash"
    UPI = "UPI"
    CARD = "Card"
    BANK_TRANSFER = "BankTransfer"


class PaperSize(str, Enum):
    A4 = "A4"
    LETTER = "Letter"


class TemplateCategory(str, Enum):
    FEE = "fee"
    WELCOME = "welcome"
    GENERAL = "general"
    REMINDER = "reminder"
