"""Invoice API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from zervos.core.context import BrowsingContext, get_context
from zervos.schemas.invoice import Invoice, InvoiceCreate, InvoiceStats, InvoiceStatusUpdate
from zervos.services.invoice_service import InvoiceService

router = APIRouter()


def get_invoice_service(context: BrowsingContext = Depends(get_context)) -> InvoiceService:
    return InvoiceService(context)


@router.get("/", response_model=list[Invoice], summary="List invoices")
async def list_invoices(
    booking_id: str | None = None,
    customer_email: str | None = None,
    service: InvoiceService = Depends(get_invoice_service),
) -> list[Invoice]:
    if booking_id is not None:
        return service.get_by_booking(booking_id)
    if customer_email is not None:
        return service.get_by_customer(customer_email)
    return service.get_all()


@router.post("/", response_model=Invoice, status_code=201, summary="Create an invoice")
async def create_invoice(
    data: InvoiceCreate,
    service: InvoiceService = Depends(get_invoice_service),
) -> Invoice:
    """Create an invoice; paid invoices are emailed to the customer in the background."""
    return service.create_invoice(data)


@router.get("/stats", response_model=InvoiceStats, summary="Invoice statistics")
async def get_invoice_stats(
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceStats:
    return service.stats()


@router.get(
    "/{invoice_id}",
    response_model=Invoice,
    summary="Get an invoice",
    responses={404: {"description": "Invoice not found"}},
)
async def get_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> Invoice:
    invoice = service.get_by_id(invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.post(
    "/{invoice_id}/status",
    response_model=Invoice,
    summary="Update invoice status",
    responses={404: {"description": "Invoice not found"}},
)
async def update_invoice_status(
    invoice_id: str,
    data: InvoiceStatusUpdate,
    service: InvoiceService = Depends(get_invoice_service),
) -> Invoice:
    invoice = service.update_status(invoice_id, data.status)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.delete(
    "/{invoice_id}",
    status_code=204,
    summary="Delete an invoice",
    responses={404: {"description": "Invoice not found"}},
)
async def delete_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> None:
    if not service.delete(invoice_id):
        raise HTTPException(status_code=404, detail="Invoice not found")
