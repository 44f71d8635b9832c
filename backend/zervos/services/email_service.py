"""Email service for sending invoice emails via SMTP."""

from __future__ import annotations

import html
import logging
from email.message import EmailMessage
from typing import TYPE_CHECKING

from zervos.core.config import settings

if TYPE_CHECKING:
    from zervos.schemas.invoice import Invoice
    from zervos.schemas.workspace import OrganizationProfile

logger = logging.getLogger(__name__)

DEFAULT_BRAND_COLOR = "#6366f1"


def _format_amount(currency: str, value: float | None) -> str:
    """Currency symbol or code followed by the amount to two decimals."""
    return f"{currency}{(value or 0):.2f}"


def _format_date(value: object) -> str:
    """Format a datetime to YYYY-MM-DD, or return empty string if None."""
    if value is None:
        return ""
    return str(value)[:10]


class EmailService:
    """Service for sending transactional emails via SMTP."""

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        *,
        text_body: str | None = None,
        from_name: str | None = None,
        reply_to: str | None = None,
    ) -> bool:
        """Send an email via SMTP.

        Args:
            to: Recipient email address.
            subject: Email subject line.
            html_body: HTML content of the email.
            text_body: Plain-text alternative; a generic line when omitted.
            from_name: Display name of the sender, ``SMTP_FROM_NAME`` by default.
            reply_to: Address replies should go to instead of the sender.

        Returns:
            True if sent successfully (or no-op when SMTP unconfigured).
        """
        if not settings.SMTP_HOST:
            logger.info("SMTP not configured, skipping email to %s: %s", to, subject)
            return True

        import aiosmtplib

        msg = EmailMessage()
        msg["From"] = f"{from_name or settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
        msg["To"] = to
        msg["Subject"] = subject
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(text_body or "Please view this email in an HTML-capable client.")
        msg.add_alternative(html_body, subtype="html")

        await aiosmtplib.send(
            msg,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME or None,
            password=settings.SMTP_PASSWORD or None,
            start_tls=settings.SMTP_USE_TLS,
        )
        logger.info("Email sent to %s: %s", to, subject)
        return True

    async def send_invoice_email(
        self,
        invoice: Invoice,
        organization: OrganizationProfile | None = None,
    ) -> bool:
        """Send an invoice receipt to the invoice's customer.

        Args:
            invoice: The invoice to send.
            organization: Organization settings; its business name and email
                take precedence over the company stored on the invoice.

        Returns:
            True if sent successfully, False when the customer has no email
            or SMTP is not configured.
        """
        if not invoice.customer.email:
            logger.warning("Invoice %s has no customer email, skipping", invoice.invoice_id)
            return False
        if not settings.SMTP_HOST:
            logger.info("SMTP not configured, invoice %s not emailed", invoice.invoice_id)
            return False

        org_name = invoice.company.name
        reply_to = invoice.company.email
        if organization is not None:
            org_name = organization.business_name or org_name
            reply_to = organization.email or reply_to
        brand_color = invoice.company.brand_color or DEFAULT_BRAND_COLOR
        customer_name = html.escape(invoice.customer.name or "Customer")
        subject = f"Invoice {invoice.invoice_id} from {org_name}"
        amount = _format_amount(invoice.currency, invoice.amount)

        html_body = (
            f'<div style="background:{brand_color};color:white;padding:20px">'
            f"<h2>Invoice {invoice.invoice_id}</h2></div>"
            f"<p>Dear {customer_name},</p>"
            f"<p>Thank you for booking with {html.escape(org_name)}.</p>"
            f"<table>"
            f"<tr><td><strong>Invoice #:</strong></td><td>{invoice.invoice_id}</td></tr>"
            f"<tr><td><strong>Service:</strong></td>"
            f"<td>{html.escape(invoice.service.name)}</td></tr>"
            f"<tr><td><strong>Amount:</strong></td><td>{amount}</td></tr>"
            f"<tr><td><strong>Issued:</strong></td>"
            f"<td>{_format_date(invoice.date_issued)}</td></tr>"
            f"<tr><td><strong>Status:</strong></td><td>{invoice.status.value}</td></tr>"
            f"</table>"
        )

        text_body = (
            f"Invoice {invoice.invoice_id} from {org_name}\n"
            f"Service: {invoice.service.name}\n"
            f"Amount: {amount}\n"
            f"Status: {invoice.status.value}\n"
        )

        return await self.send_email(
            to=invoice.customer.email,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            from_name=org_name,
            reply_to=reply_to,
        )
