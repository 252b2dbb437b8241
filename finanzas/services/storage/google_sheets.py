"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets can back the key-value store because:
1. Non-technical users can inspect their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

Each key is one row: [key, value_json, updated_at].

TRADEOFFS:
- A cell holds at most 50,000 characters, which caps the roster size
- No transactions (a save is a read-then-write of one row)
- Every read fetches the whole worksheet (we filter in Python)
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from finanzas.config import get_settings
from finanzas.services.storage.interface import (
    KeyValueStore,
    StorageConnectionError,
)


logger = structlog.get_logger(__name__)

STORE_COLUMNS = ["key", "value_json", "updated_at"]


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
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

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
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_store_sheet(self) -> gspread.Worksheet:
        """Get or create the key-value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.store_sheet_name)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=self._settings.store_sheet_name,
                rows=100,
                cols=len(STORE_COLUMNS),
            )
            sheet.append_row(STORE_COLUMNS)
        return sheet


class GoogleSheetsStore(KeyValueStore):
    """
    Google Sheets implementation of the key-value store.

    API failures are absorbed here: reads degrade to None and writes to
    False, with the error logged.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _find_row(rows: list[list[str]], key: str) -> Optional[int]:
        """1-based sheet row index holding key, skipping the header."""
        for idx, row in enumerate(rows[1:], start=2):
            if row and row[0] == key:
                return idx
        return None

    def get(self, key: str) -> Optional[Any]:
        try:
            rows = self._client.get_store_sheet().get_all_values()
            idx = self._find_row(rows, key)
            if idx is None:
                return None
            row = rows[idx - 1]
            if len(row) < 2 or not row[1]:
                return None
            return json.loads(row[1])
        except Exception as e:
            logger.warning("store_read_failed", key=key, backend="google_sheets", error=str(e))
            return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _write(self, key: str, payload: str) -> None:
        sheet = self._client.get_store_sheet()
        updated_at = datetime.now(timezone.utc).isoformat()
        idx = self._find_row(sheet.get_all_values(), key)
        if idx is None:
            sheet.append_row([key, payload, updated_at], value_input_option="RAW")
        else:
            sheet.update_cell(idx, 2, payload)
            sheet.update_cell(idx, 3, updated_at)

    def save(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("store_serialize_failed", key=key, error=str(e))
            return False

        try:
            self._write(key, payload)
            return True
        except Exception as e:
            logger.error("store_write_failed", key=key, backend="google_sheets", error=str(e))
            return False

    def remove(self, key: str) -> None:
        try:
            sheet = self._client.get_store_sheet()
            idx = self._find_row(sheet.get_all_values(), key)
            if idx is not None:
                sheet.delete_rows(idx)
        except Exception as e:
            logger.error("store_remove_failed", key=key, backend="google_sheets", error=str(e))
