"""Invoice schemas."""

from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from backend.app.core.time import parse_date
from backend.app.models.enums import BatchType, Currency, InvoiceStatus, PageSize, PaymentTerms, PdfTheme
from backend.app.services.work_hours import check_work_hours_calendar


def _check_business_date(value):
    if value is None:
        return value
    parse_date(value)
    return value


class PartyInfo(BaseModel):
    name: str = ""
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    tax_id: Optional[str] = None
    logo: Optional[str] = None


class BankDetails(BaseModel):
    bank_name: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = None
    routing_number: Optional[str] = None
    swift_code: Optional[str] = None
    iban: Optional[str] = None
    branch: Optional[str] = None


class DailyWorkHours(BaseModel):
    date: str
    hours: float = Field(ge=0, le=24)
    is_workday: bool = True
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, v):
        return _check_business_date(v)

    @field_validator("hours")
    @classmethod
    def check_half_hours(cls, v):
        if (v * 2) != int(v * 2):
            raise ValueError("hours must be a multiple of 0.5")
        return v


class LineItem(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    description: str = ""
    quantity: float = 0
    unit_price: float = 0
    amount: float = 0


class StatusChangeEvent(BaseModel):
    status: InvoiceStatus
    timestamp: str
    note: Optional[str] = None


class InvoiceBase(BaseModel):
    issue_date: Optional[str] = None
    due_date: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None

    from_party: PartyInfo = Field(default_factory=PartyInfo)
    to_party: PartyInfo = Field(default_factory=PartyInfo)

    hourly_rate: float = Field(default=0, ge=0)
    default_hours_per_day: float = Field(default=8, ge=0, le=24)
    daily_work_hours: List[DailyWorkHours] = Field(default_factory=list)
    line_items: List[LineItem] = Field(default_factory=list)

    discount_percent: float = Field(default=0, ge=0, le=100)
    tax_percent: float = Field(default=0, ge=0, le=100)

    currency: Currency = Currency.USD
    payment_terms: PaymentTerms = PaymentTerms.NET_30
    custom_payment_terms: Optional[str] = None
    bank_details: Optional[BankDetails] = None

    notes: Optional[str] = None
    terms: Optional[str] = None
    job_title: Optional[str] = None

    show_detailed_hours: bool = False
    pdf_theme: PdfTheme = PdfTheme.LIGHT
    background_design_id: Optional[str] = None
    page_size: PageSize = PageSize.A4

    @field_validator("issue_date", "due_date", "period_start", "period_end")
    @classmethod
    def check_dates(cls, v):
        return _check_business_date(v)

    @model_validator(mode="after")
    def check_work_hours(self):
        check_work_hours_calendar(self.daily_work_hours, self.period_start, self.period_end)
        return self


class InvoiceCreate(InvoiceBase):
    """Schema for creating an invoice. A missing number is allocated in the folder scope."""

    invoice_number: Optional[str] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    folder_id: Optional[int] = None
    tags: List[int] = Field(default_factory=list)
    remove_draft_on_save: bool = False


class InvoiceUpdate(BaseModel):
    invoice_number: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    status_note: Optional[str] = None
    remove_draft_on_save: bool = False
    folder_id: Optional[int] = None
    tags: Optional[List[int]] = None

    issue_date: Optional[str] = None
    due_date: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None

    from_party: Optional[PartyInfo] = None
    to_party: Optional[PartyInfo] = None

    hourly_rate: Optional[float] = Field(default=None, ge=0)
    default_hours_per_day: Optional[float] = Field(default=None, ge=0, le=24)
    daily_work_hours: Optional[List[DailyWorkHours]] = None
    line_items: Optional[List[LineItem]] = None

    discount_percent: Optional[float] = Field(default=None, ge=0, le=100)
    tax_percent: Optional[float] = Field(default=None, ge=0, le=100)

    currency: Optional[Currency] = None
    payment_terms: Optional[PaymentTerms] = None
    custom_payment_terms: Optional[str] = None
    bank_details: Optional[BankDetails] = None

    notes: Optional[str] = None
    terms: Optional[str] = None
    job_title: Optional[str] = None

    show_detailed_hours: Optional[bool] = None
    pdf_theme: Optional[PdfTheme] = None
    background_design_id: Optional[str] = None
    page_size: Optional[PageSize] = None

    @field_validator("issue_date", "due_date", "period_start", "period_end")
    @classmethod
    def check_dates(cls, v):
        return _check_business_date(v)

    @model_validator(mode="after")
    def check_work_hours(self):
        check_work_hours_calendar(self.daily_work_hours, self.period_start, self.period_end)
        return self


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    folder_id: Optional[int] = None
    invoice_number: str
    status: InvoiceStatus
    status_history: List[StatusChangeEvent]

    issue_date: str
    due_date: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    sent_at: Optional[str] = None
    paid_at: Optional[str] = None
    viewed_at: Optional[str] = None

    from_party: PartyInfo
    to_party: PartyInfo

    hourly_rate: float
    default_hours_per_day: float
    daily_work_hours: List[DailyWorkHours]
    total_days: int
    total_hours: float
    subtotal: float
    line_items: List[LineItem]

    discount_percent: float
    discount_amount: float
    tax_percent: float
    tax_amount: float
    total_amount: float

    currency: Currency
    payment_terms: PaymentTerms
    custom_payment_terms: Optional[str] = None
    bank_details: Optional[BankDetails] = None

    notes: Optional[str] = None
    terms: Optional[str] = None
    job_title: Optional[str] = None
    tags: List[int]

    is_archived: bool
    archived_at: Optional[str] = None
    is_move_locked: bool
    show_detailed_hours: bool
    pdf_theme: PdfTheme
    background_design_id: Optional[str] = None
    page_size: PageSize

    created_at: int
    updated_at: int


class InvoiceFilters(BaseModel):
    folder_id: Optional[int] = None
    unfiled: bool = False
    status: Optional[InvoiceStatus] = None
    statuses: Optional[List[InvoiceStatus]] = None
    is_archived: Optional[bool] = False
    tags: Optional[List[int]] = None
    client_name: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    amount_min: Optional[float] = None
    amount_max: Optional[float] = None
    search: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)

    @field_validator("date_from", "date_to")
    @classmethod
    def check_dates(cls, v):
        return _check_business_date(v)


class InvoiceDuplicate(BaseModel):
    invoice_number: Optional[str] = None
    folder_id: Optional[int] = None
    copy_work_hours: bool = True
    copy_tags: bool = False


class InvoiceMove(BaseModel):
    folder_id: Optional[int] = None


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus
    note: Optional[str] = None


class BulkInvoiceIds(BaseModel):
    invoice_ids: List[int]


class BulkStatusUpdate(BulkInvoiceIds):
    status: InvoiceStatus
    note: Optional[str] = None


class BulkMove(BulkInvoiceIds):
    folder_id: Optional[int] = None


class BulkOperationResult(BaseModel):
    processed: int = 0
    succeeded: int = 0
    locked: int = 0
    not_found: int = 0
    conflicts: int = 0


class QuickCreateRequest(BaseModel):
    folder_id: Optional[int] = None
    issue_date: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)

    @field_validator("issue_date", "period_start", "period_end")
    @classmethod
    def check_dates(cls, v):
        return _check_business_date(v)


class NextInvoiceNumber(BaseModel):
    prefix: str = ""
    number: int
    formatted: str


class InvoiceNumberAvailability(BaseModel):
    invoice_number: str
    available: bool


class BillingPeriodRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start: str
    end: str
    label: str
    batch: BatchType
    is_auto_detected: bool = False


class WorkHoursRequest(BaseModel):
    start: str
    end: str
    default_hours: float = Field(default=8, ge=0, le=24)

    @field_validator("start", "end")
    @classmethod
    def check_dates(cls, v):
        return _check_business_date(v)


class CalculateRequest(BaseModel):
    daily_work_hours: List[DailyWorkHours] = Field(default_factory=list)
    hourly_rate: float = Field(default=0, ge=0)
    line_items: List[LineItem] = Field(default_factory=list)
    discount_percent: float = Field(default=0, ge=0, le=100)
    tax_percent: float = Field(default=0, ge=0, le=100)


class InvoiceTotalsRead(BaseModel):
    total_days: int
    total_hours: float
    subtotal: float
    discount_amount: float
    tax_amount: float
    total_amount: float
    line_items: List[LineItem] = Field(default_factory=list)
