"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the remote document store because:
1. Users can view their own transactions directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions (one row is one document, writes are independent)
- Limited query capabilities (we filter by owner in Python)

Each transaction document is one row; the first column is the
document id. The implementation follows the abstract interface, so we can
swap to a real document database later without changing the ledger.
"""

from typing import Any, Optional
from uuid import uuid4

import gspread
import structlog
from google.oauth2.service_account import Credentials
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from src.config import get_settings
from src.models.audit import AuditEvent
from src.models.transaction import Transaction
from src.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)


# Column mappings for Transactions sheet
TRANSACTION_COLUMNS = [
    "id",
    "user_id",
    "amount",
    "category",
    "description",
    "date",
    "type",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "user_id",
    "transaction_id",
    "description",
    "details_json",
    "error_message",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        return self._get_or_create_sheet(
            self._settings.transactions_sheet_name,
            TRANSACTION_COLUMNS,
            rows=1000,
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name,
            AUDIT_COLUMNS,
            rows=5000,  # More rows for audit log
        )


def _document_to_row(transaction_id: str, document: dict[str, Any]) -> list:
    """Lay a document out in TRANSACTION_COLUMNS order."""
    row = [transaction_id]
    for column in TRANSACTION_COLUMNS[1:]:
        value = document.get(column)
        row.append("" if value is None else str(value))
    return row


def _row_to_transaction(row: list) -> Transaction:
    """Convert a spreadsheet row to a Transaction."""
    padded = list(row) + [""] * (len(TRANSACTION_COLUMNS) - len(row))
    data = dict(zip(TRANSACTION_COLUMNS, padded))
    return Transaction(**data)


class GoogleSheetsTransactionStorage(TransactionStorageInterface):
    """
    Google Sheets implementation of the transaction document store.

    Ids are generated here, as a document database would generate them.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, all_rows: list[list], user_id: str, transaction_id: str) -> Optional[int]:
        """1-based sheet row index of a user's document, or None."""
        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is the header
            if len(row) > 1 and row[0] == transaction_id and row[1] == user_id:
                return idx
        return None

    async def create(self, document: dict[str, Any]) -> str:
        """Append a new document row under a freshly generated id."""
        transaction_id = uuid4().hex
        try:
            await self._append_row(transaction_id, document)
            return transaction_id
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _append_row(self, transaction_id: str, document: dict[str, Any]) -> None:
        # A retried append may follow one the server applied but never
        # acknowledged; the id is fixed, so the row is written at most once
        sheet = self._client.get_transactions_sheet()
        if self._find_row(sheet.get_all_values(), document.get("user_id"), transaction_id):
            return
        sheet.append_row(
            _document_to_row(transaction_id, document),
            value_input_option="RAW",
        )

    async def list_by_user(self, user_id: str) -> list[Transaction]:
        """Fetch all of a user's documents, skipping malformed rows."""
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")

        transactions = []
        for row in all_rows:
            if len(row) < 2 or not row[0] or row[1] != user_id:
                continue
            try:
                transactions.append(_row_to_transaction(row))
            except ValidationError as e:
                logger.warning(
                    "skipping_malformed_row",
                    transaction_id=row[0],
                    error=str(e),
                )
        return transactions

    async def update(
        self,
        user_id: str,
        transaction_id: str,
        fields: dict[str, Any],
    ) -> None:
        """Rewrite the changed cells of a document row."""
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()
            idx = self._find_row(all_rows, user_id, transaction_id)
            if idx is None:
                raise NotFoundError(f"Transaction not found: {transaction_id}")

            for column, value in fields.items():
                if column not in TRANSACTION_COLUMNS[2:]:
                    continue
                col_idx = TRANSACTION_COLUMNS.index(column) + 1
                sheet.update_cell(idx, col_idx, "" if value is None else str(value))
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update transaction: {e}")

    async def delete(self, user_id: str, transaction_id: str) -> None:
        """Delete a document row. Missing rows are not an error."""
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()
            idx = self._find_row(all_rows, user_id, transaction_id)
            if idx is not None:
                sheet.delete_rows(idx)
        except Exception as e:
            raise StorageError(f"Failed to delete transaction: {e}")


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # Audit logging should not break the main flow
            logger.warning(
                "audit_write_failed",
                event_id=str(event.event_id),
                error=str(e),
            )
            return False
