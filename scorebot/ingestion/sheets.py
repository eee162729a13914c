"""
Google Sheets Score Source

Reads score tabs from a Google spreadsheet with a read-only service account.
Each tab is one game: a header row (Team, Hole 1, Hole 2, ...) followed by one
row of strokes per team.

Usage:
    from scorebot.ingestion.sheets import GoogleSheetsSource
    source = GoogleSheetsSource.from_env()
    titles = source.list_tables()
    rows = source.get_rows(titles[0])
"""

import json
import os
from typing import Any, Mapping

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from scorebot.config import GOOGLE_CREDENTIALS_ENV, SHEETS_SCOPES, SPREADSHEET_ID_ENV
from scorebot.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class DataSourceError(Exception):
    """Base exception for score source errors"""
    pass


class TableNotFoundError(DataSourceError):
    """Raised when a tab does not exist or cannot be read"""
    pass


def a1_sheet_range(table_name: str) -> str:
    """
    Quote a tab title for use as an A1 range covering the whole tab.

    Titles with spaces or apostrophes ("Charlotte National '25") must be
    wrapped in single quotes, with embedded quotes doubled.
    """
    return "'" + table_name.replace("'", "''") + "'"


class GoogleSheetsSource:
    """Score tabs of one spreadsheet, read through the Sheets API v4."""

    def __init__(self, spreadsheet_id: str, credentials):
        self.spreadsheet_id = spreadsheet_id
        self.credentials = credentials

    @classmethod
    def from_service_account_info(cls, spreadsheet_id: str, info: Mapping[str, Any]) -> "GoogleSheetsSource":
        credentials = service_account.Credentials.from_service_account_info(
            dict(info), scopes=list(SHEETS_SCOPES)
        )
        return cls(spreadsheet_id, credentials)

    @classmethod
    def from_env(cls) -> "GoogleSheetsSource":
        """
        Build a source from SPREADSHEET_ID and GOOGLE_CREDENTIALS.

        Raises:
            ValueError: If either variable is missing or the credentials are not JSON
        """
        spreadsheet_id = os.getenv(SPREADSHEET_ID_ENV)
        raw_credentials = os.getenv(GOOGLE_CREDENTIALS_ENV)
        if not spreadsheet_id:
            raise ValueError(f"{SPREADSHEET_ID_ENV} environment variable is missing")
        if not raw_credentials:
            raise ValueError(f"{GOOGLE_CREDENTIALS_ENV} environment variable is missing")

        try:
            info = json.loads(raw_credentials)
        except json.JSONDecodeError as e:
            raise ValueError(f"{GOOGLE_CREDENTIALS_ENV} is not valid JSON: {e}") from e

        return cls.from_service_account_info(spreadsheet_id, info)

    def _service(self):
        # httplib2 transports are not thread-safe; calls run in worker threads,
        # so each call gets its own client.
        return build("sheets", "v4", credentials=self.credentials, cache_discovery=False)

    def list_tables(self) -> list[str]:
        """
        Titles of all tabs, in spreadsheet order.

        Raises:
            DataSourceError: If the spreadsheet cannot be read
        """
        try:
            spreadsheet = (
                self._service()
                .spreadsheets()
                .get(spreadsheetId=self.spreadsheet_id, fields="sheets.properties.title")
                .execute()
            )
        except HttpError as e:
            raise DataSourceError(f"Could not read spreadsheet {self.spreadsheet_id}: {e}") from e

        titles = [s["properties"]["title"] for s in spreadsheet.get("sheets", [])]
        logger.debug(f"Spreadsheet has {len(titles)} tabs")
        return titles

    def get_rows(self, table_name: str) -> list[list]:
        """
        All non-empty rows of one tab as formatted cell strings.

        Raises:
            TableNotFoundError: If the tab does not exist or the request fails
        """
        try:
            response = (
                self._service()
                .spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=a1_sheet_range(table_name))
                .execute()
            )
        except HttpError as e:
            raise TableNotFoundError(f"No readable tab named '{table_name}': {e}") from e

        rows = response.get("values", [])
        logger.debug(f"Fetched {len(rows)} rows from '{table_name}'")
        return rows
