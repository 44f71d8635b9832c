"""Tests for the invoice store and its notification/email side effects."""

import re
from unittest.mock import AsyncMock, patch

import pytest

from zervos.core.events import Event, EventName
from zervos.repositories.workspace_repository import ORGANIZATION_KEY
from zervos.schemas.invoice import (
    InvoiceCompany,
    InvoiceCreate,
    InvoiceCustomer,
    InvoiceServiceLine,
    InvoiceStatus,
)
from zervos.schemas.notification import NotificationCategory
from zervos.services.email_service import settings as email_settings
from zervos.services.invoice_service import InvoiceService, generate_invoice_id
from zervos.services.notification_service import NotificationService


def _invoice_data(**overrides) -> InvoiceCreate:  # type: ignore[no-untyped-def]
    defaults = {
        "booking_id": "BK-0001",
        "customer": InvoiceCustomer(name="Jane Doe", email="jane@example.com"),
        "service": InvoiceServiceLine(name="Beard Design", duration="30 min", price=25.0),
        "amount": 25.0,
        "company": InvoiceCompany(name="Acme Salon"),
    }
    defaults.update(overrides)
    return InvoiceCreate(**defaults)


@pytest.fixture
def email_service():
    mock = AsyncMock()
    mock.send_invoice_email.return_value = True
    return mock


@pytest.fixture
def service(tab, clock, email_service):
    return InvoiceService(tab, email_service=email_service, clock=clock)


# ---------------------------------------------------------------------------
# create_invoice
# ---------------------------------------------------------------------------


class TestCreateInvoice:
    def test_persists_with_generated_id(self, service, clock) -> None:
        invoice = service.create_invoice(_invoice_data())
        assert re.fullmatch(r"INV-20251107-\d{4}", invoice.invoice_id)
        assert invoice.date_issued == clock.now
        assert service.get_all() == [invoice]

    def test_ids_are_unique(self, service) -> None:
        with patch("zervos.services.invoice_service.secrets.randbelow", side_effect=[0, 0, 1]):
            first = service.create_invoice(_invoice_data())
            second = service.create_invoice(_invoice_data())
        assert first.invoice_id == "INV-20251107-1000"
        assert second.invoice_id == "INV-20251107-1001"

    def test_publishes_invoice_created(self, service, tab) -> None:
        received: list[Event] = []
        tab.events.subscribe(EventName.INVOICE_CREATED, received.append)
        invoice = service.create_invoice(_invoice_data())
        assert received[0].detail == {"invoice": invoice}

    def test_adds_notification(self, service, tab) -> None:
        invoice = service.create_invoice(_invoice_data())
        (record,) = NotificationService(tab).list_all()
        assert record.title == "Invoice created"
        assert record.category == NotificationCategory.INVOICES
        assert record.path == "/dashboard/invoices"
        assert invoice.invoice_id in (record.body or "")

    def test_paid_invoice_notification_title(self, service, tab) -> None:
        service.create_invoice(_invoice_data(status=InvoiceStatus.PAID))
        assert NotificationService(tab).list_all()[0].title == "Invoice paid"

    def test_pending_invoice_is_not_emailed(self, service, email_service) -> None:
        service.create_invoice(_invoice_data())
        email_service.send_invoice_email.assert_not_called()

    def test_paid_without_event_loop_skips_email(self, service, email_service) -> None:
        invoice = service.create_invoice(_invoice_data(status=InvoiceStatus.PAID))
        email_service.send_invoice_email.assert_not_called()
        assert service.get_by_id(invoice.invoice_id) == invoice

    @pytest.mark.asyncio
    async def test_paid_invoice_is_emailed(self, service, email_service, tab) -> None:
        tab.storage.write(ORGANIZATION_KEY, {"businessName": "Acme Ltd"})
        invoice = service.create_invoice(_invoice_data(status=InvoiceStatus.PAID))
        await service.wait_for_emails()

        email_service.send_invoice_email.assert_awaited_once()
        sent_invoice, organization = email_service.send_invoice_email.call_args[0]
        assert sent_invoice == invoice
        assert organization.business_name == "Acme Ltd"
        (log,) = service.repo.get_email_logs()
        assert log.invoice_id == invoice.invoice_id
        assert log.recipient == "jane@example.com"

    @pytest.mark.asyncio
    async def test_paid_without_customer_email_is_not_emailed(
        self, service, email_service
    ) -> None:
        service.create_invoice(
            _invoice_data(
                status=InvoiceStatus.PAID,
                customer=InvoiceCustomer(name="Walk-in"),
            )
        )
        await service.wait_for_emails()
        email_service.send_invoice_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_email_log_when_smtp_unconfigured(self, tab, clock) -> None:
        service = InvoiceService(tab, clock=clock)
        with patch.object(email_settings, "SMTP_HOST", ""):
            invoice = service.create_invoice(
                _invoice_data(
                    status=InvoiceStatus.PAID,
                    customer=InvoiceCustomer(name="Ann", email="a@x.com"),
                )
            )
            await service.wait_for_emails()

        assert service.get_all() == [invoice]
        assert service.repo.get_email_logs() == []

    @pytest.mark.asyncio
    async def test_email_failure_keeps_invoice(self, service, email_service) -> None:
        email_service.send_invoice_email.side_effect = ConnectionError("smtp down")
        invoice = service.create_invoice(_invoice_data(status=InvoiceStatus.PAID))
        await service.wait_for_emails()

        assert service.get_all() == [invoice]
        assert service.repo.get_email_logs() == []

    @pytest.mark.asyncio
    async def test_send_invoice_email_reports_failure(self, service, email_service) -> None:
        email_service.send_invoice_email.side_effect = ConnectionError("smtp down")
        invoice = service.create_invoice(_invoice_data())
        assert await service.send_invoice_email(invoice) is False


# ---------------------------------------------------------------------------
# Lookups and updates
# ---------------------------------------------------------------------------


class TestLookups:
    @pytest.fixture
    def invoices(self, service):
        return [
            service.create_invoice(_invoice_data(booking_id="BK-1", amount=10.0)),
            service.create_invoice(
                _invoice_data(
                    booking_id="BK-2",
                    amount=20.0,
                    status=InvoiceStatus.PAID,
                    customer=InvoiceCustomer(name="Sam", email="Sam@Example.com"),
                )
            ),
            service.create_invoice(
                _invoice_data(booking_id="BK-1", amount=5.0, status=InvoiceStatus.CANCELLED)
            ),
        ]

    def test_get_by_booking(self, service, invoices) -> None:
        assert service.get_by_booking("BK-1") == [invoices[0], invoices[2]]

    def test_get_by_customer_is_case_insensitive(self, service, invoices) -> None:
        assert service.get_by_customer("sam@example.com") == [invoices[1]]

    def test_get_by_id_unknown(self, service, invoices) -> None:
        assert service.get_by_id("INV-00000000-0000") is None

    def test_update_status(self, service, invoices) -> None:
        updated = service.update_status(invoices[0].invoice_id, InvoiceStatus.PAID)
        assert updated is not None and updated.status == InvoiceStatus.PAID
        assert service.get_by_id(invoices[0].invoice_id).status == InvoiceStatus.PAID

    def test_update_status_unknown(self, service, invoices) -> None:
        assert service.update_status("missing", InvoiceStatus.PAID) is None

    def test_delete(self, service, invoices) -> None:
        assert service.delete(invoices[1].invoice_id) is True
        assert service.delete(invoices[1].invoice_id) is False
        assert len(service.get_all()) == 2

    def test_stats(self, service, invoices) -> None:
        stats = service.stats()
        assert stats.total == 3
        assert stats.paid == 1
        assert stats.pending == 1
        assert stats.cancelled == 1
        assert stats.total_revenue == 20.0


class TestGenerateInvoiceId:
    def test_format(self, clock) -> None:
        assert re.fullmatch(r"INV-20251107-[1-9]\d{3}", generate_invoice_id(clock.now))
