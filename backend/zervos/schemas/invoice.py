from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from zervos.schemas.shared import CamelModel


class InvoiceStatus(str, Enum):
    PAID = "Paid"
    PENDING = "Pending"
    CANCELLED = "Cancelled"


class InvoiceCustomer(CamelModel):
    name: str
    email: str = ""
    phone: str | None = None


class InvoiceServiceLine(CamelModel):
    name: str
    duration: str = ""
    price: float = 0.0


class InvoiceCompany(CamelModel):
    name: str
    email: str | None = None
    logo: str | None = None
    brand_color: str | None = None


class InvoiceCreate(CamelModel):
    booking_id: str
    customer: InvoiceCustomer
    service: InvoiceServiceLine
    amount: float = Field(..., ge=0)
    payment_method: str = "Cash"
    currency: str = "$"
    status: InvoiceStatus = InvoiceStatus.PENDING
    company: InvoiceCompany
    booking_date: str | None = None
    booking_time: str | None = None
    tax_amount: float | None = None
    subtotal: float | None = None
    notes: str | None = None


class Invoice(InvoiceCreate):
    invoice_id: str
    date_issued: datetime


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class InvoiceStats(CamelModel):
    total: int
    paid: int
    pending: int
    cancelled: int
    total_revenue: float


class InvoiceEmailLog(CamelModel):
    invoice_id: str
    recipient: str
    sent_at: datetime
    status: str = "sent"
