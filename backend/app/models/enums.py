"""Enumerations shared by models, schemas and services."""

from enum import Enum


class InvoiceStatus(str, Enum):
    DRAFT = "DRAFT"
    TO_SEND = "TO_SEND"
    SENT = "SENT"
    VIEWED = "VIEWED"
    PARTIAL_PAYMENT = "PARTIAL_PAYMENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    PHP = "PHP"
    JPY = "JPY"
    AUD = "AUD"
    CAD = "CAD"
    SGD = "SGD"


class PaymentTerms(str, Enum):
    DUE_ON_RECEIPT = "DUE_ON_RECEIPT"
    NET_7 = "NET_7"
    NET_15 = "NET_15"
    NET_30 = "NET_30"
    NET_45 = "NET_45"
    NET_60 = "NET_60"
    CUSTOM = "CUSTOM"


class PageSize(str, Enum):
    A4 = "A4"
    LETTER = "LETTER"
    LEGAL = "LEGAL"
    LONG = "LONG"
    SHORT = "SHORT"
    A5 = "A5"
    B5 = "B5"


class PdfTheme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class TagType(str, Enum):
    INVOICE = "invoice"
    FOLDER = "folder"
    BOTH = "both"


class BatchType(str, Enum):
    FIRST_BATCH = "1st_batch"
    SECOND_BATCH = "2nd_batch"
    WHOLE_MONTH = "whole_month"


class ScheduleFrequency(str, Enum):
    EVERY_15TH = "EVERY_15TH"
    EVERY_LAST_DAY = "EVERY_LAST_DAY"
    BOTH_15TH_AND_LAST = "BOTH_15TH_AND_LAST"
    CUSTOM = "CUSTOM"


CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
    Currency.PHP: "₱",
    Currency.JPY: "¥",
    Currency.AUD: "A$",
    Currency.CAD: "C$",
    Currency.SGD: "S$",
}

PAYMENT_TERMS_LABELS = {
    PaymentTerms.DUE_ON_RECEIPT: "Due on Receipt",
    PaymentTerms.NET_7: "Net 7 Days",
    PaymentTerms.NET_15: "Net 15 Days",
    PaymentTerms.NET_30: "Net 30 Days",
    PaymentTerms.NET_45: "Net 45 Days",
    PaymentTerms.NET_60: "Net 60 Days",
    PaymentTerms.CUSTOM: "Custom",
}

# Page dimensions in millimetres
PAGE_SIZES = {
    PageSize.A4: (210.0, 297.0),
    PageSize.LETTER: (215.9, 279.4),
    PageSize.LEGAL: (215.9, 355.6),
    PageSize.LONG: (215.9, 330.2),
    PageSize.SHORT: (215.9, 266.7),
    PageSize.A5: (148.0, 210.0),
    PageSize.B5: (176.0, 250.0),
}
