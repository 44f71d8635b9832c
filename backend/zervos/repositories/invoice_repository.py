from __future__ import annotations

import logging

from pydantic import ValidationError

from zervos.schemas.invoice import Invoice, InvoiceEmailLog
from zervos.storage.local_store import LocalStore

logger = logging.getLogger(__name__)

INVOICES_KEY = "zervos_invoices"
EMAIL_LOG_KEY = "invoice_email_logs"


class InvoiceRepository:
    def __init__(self, store: LocalStore):
        self.store = store

    def get_all(self) -> list[Invoice]:
        invoices = []
        for raw in self.store.read_list(INVOICES_KEY):
            try:
                invoices.append(Invoice.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed invoice %r: %s", raw, e)
        return invoices

    def save_all(self, invoices: list[Invoice]) -> bool:
        return self.store.write(INVOICES_KEY, [i.to_storage() for i in invoices])

    def get_email_logs(self) -> list[InvoiceEmailLog]:
        logs = []
        for raw in self.store.read_list(EMAIL_LOG_KEY):
            try:
                logs.append(InvoiceEmailLog.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed email log %r: %s", raw, e)
        return logs

    def append_email_log(self, entry: InvoiceEmailLog) -> bool:
        logs = self.store.read_list(EMAIL_LOG_KEY)
        logs.append(entry.to_storage())
        return self.store.write(EMAIL_LOG_KEY, logs)
