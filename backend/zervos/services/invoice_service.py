"""Invoice local store with notification and email side effects."""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections.abc import Callable
from datetime import UTC, datetime

from zervos.core.context import BrowsingContext
from zervos.core.events import EventName
from zervos.repositories.invoice_repository import InvoiceRepository
from zervos.repositories.workspace_repository import WorkspaceRepository
from zervos.schemas.invoice import (
    Invoice,
    InvoiceCreate,
    InvoiceEmailLog,
    InvoiceStats,
    InvoiceStatus,
)
from zervos.schemas.notification import NotificationCategory
from zervos.services.email_service import EmailService
from zervos.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

INVOICES_PATH = "/dashboard/invoices"


def utc_now() -> datetime:
    return datetime.now(UTC)


def generate_invoice_id(now: datetime) -> str:
    """``INV-YYYYMMDD-NNNN`` with a random four-digit suffix."""
    return f"INV-{now:%Y%m%d}-{1000 + secrets.randbelow(9000)}"


class InvoiceService:
    def __init__(
        self,
        context: BrowsingContext,
        notifications: NotificationService | None = None,
        email_service: EmailService | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.context = context
        self.repo = InvoiceRepository(context.storage)
        self.notifications = notifications or NotificationService(context, clock=clock)
        self.email_service = email_service or EmailService()
        self._now = clock or utc_now
        self._pending_emails: set[asyncio.Task[bool]] = set()

    def create_invoice(self, data: InvoiceCreate) -> Invoice:
        """Persist a new invoice, announce it and queue the customer email.

        The email is best effort: it only runs when an event loop is running,
        and its failure never removes the invoice.
        """
        now = self._now()
        invoices = self.repo.get_all()
        existing_ids = {i.invoice_id for i in invoices}
        invoice_id = generate_invoice_id(now)
        while invoice_id in existing_ids:
            invoice_id = generate_invoice_id(now)

        invoice = Invoice(**data.model_dump(), invoice_id=invoice_id, date_issued=now)
        invoices.append(invoice)
        self.repo.save_all(invoices)

        self.context.events.publish(EventName.INVOICE_CREATED, {"invoice": invoice})
        self.notifications.add_notification(
            title="Invoice paid" if invoice.status == InvoiceStatus.PAID else "Invoice created",
            body=(
                f"Invoice {invoice.invoice_id} for {invoice.customer.name} "
                f"({invoice.currency}{invoice.amount:.2f})"
            ),
            category=NotificationCategory.INVOICES,
            path=INVOICES_PATH,
        )

        if invoice.status == InvoiceStatus.PAID and invoice.customer.email:
            self._schedule_email(invoice)
        return invoice

    def _schedule_email(self, invoice: Invoice) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.info("No running event loop, invoice email for %s not sent", invoice.invoice_id)
            return
        task = loop.create_task(self.send_invoice_email(invoice))
        self._pending_emails.add(task)
        task.add_done_callback(self._pending_emails.discard)

    async def send_invoice_email(self, invoice: Invoice) -> bool:
        """Email the invoice to its customer; failures are logged, not raised."""
        organization = WorkspaceRepository(self.context.storage).get_organization()
        try:
            sent = await self.email_service.send_invoice_email(invoice, organization)
        except Exception:
            logger.exception("Failed to send invoice email for %s", invoice.invoice_id)
            return False
        if sent:
            self.repo.append_email_log(
                InvoiceEmailLog(
                    invoice_id=invoice.invoice_id,
                    recipient=invoice.customer.email,
                    sent_at=self._now(),
                )
            )
            logger.info("Invoice email sent to %s", invoice.customer.email)
        return sent

    async def wait_for_emails(self) -> None:
        """Wait for queued invoice emails to finish."""
        if self._pending_emails:
            await asyncio.gather(*list(self._pending_emails), return_exceptions=True)

    def get_all(self) -> list[Invoice]:
        return self.repo.get_all()

    def get_by_id(self, invoice_id: str) -> Invoice | None:
        return next((i for i in self.repo.get_all() if i.invoice_id == invoice_id), None)

    def get_by_booking(self, booking_id: str) -> list[Invoice]:
        return [i for i in self.repo.get_all() if i.booking_id == booking_id]

    def get_by_customer(self, email: str) -> list[Invoice]:
        wanted = email.lower()
        return [i for i in self.repo.get_all() if i.customer.email.lower() == wanted]

    def update_status(self, invoice_id: str, status: InvoiceStatus) -> Invoice | None:
        invoices = self.repo.get_all()
        for index, invoice in enumerate(invoices):
            if invoice.invoice_id == invoice_id:
                updated = invoice.model_copy(update={"status": status})
                invoices[index] = updated
                self.repo.save_all(invoices)
                return updated
        return None

    def delete(self, invoice_id: str) -> bool:
        invoices = self.repo.get_all()
        remaining = [i for i in invoices if i.invoice_id != invoice_id]
        if len(remaining) == len(invoices):
            return False
        self.repo.save_all(remaining)
        return True

    def stats(self) -> InvoiceStats:
        invoices = self.repo.get_all()
        paid = [i for i in invoices if i.status == InvoiceStatus.PAID]
        return InvoiceStats(
            total=len(invoices),
            paid=len(paid),
            pending=sum(1 for i in invoices if i.status == InvoiceStatus.PENDING),
            cancelled=sum(1 for i in invoices if i.status == InvoiceStatus.CANCELLED),
            total_revenue=sum(i.amount for i in paid),
        )
