"""Google Sheets codec backed by the Sheets API."""

import logging
from typing import Any, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..config import settings
from .codec import SpreadsheetCodec
from .models import Cell, Sheet, Workbook

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def _quote_sheet(title: str) -> str:
    return "'" + title.replace("'", "''") + "'"


class GoogleSheetsCodec(SpreadsheetCodec):
    """Load and save workbooks from Google Sheets spreadsheets.

    Values and formulas are carried; cell styles are not.
    """

    def __init__(self, service: Optional[Any] = None):
        self._service = service
        self._credentials = None

    def _get_credentials(self) -> Credentials:
        """Get or refresh OAuth2 credentials."""
        creds = None

        if settings.google_token_path.exists():
            creds = Credentials.from_authorized_user_file(str(settings.google_token_path), SCOPES)

        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                creds.refresh(Request())
            else:
                if not settings.google_credentials_path.exists():
                    raise FileNotFoundError(
                        f"Google credentials file not found at {settings.google_credentials_path}. "
                        "Please download it from Google Cloud Console."
                    )
                flow = InstalledAppFlow.from_client_secrets_file(
                    str(settings.google_credentials_path), SCOPES
                )
                creds = flow.run_local_server(port=0)

            # Save credentials for next run
            settings.google_token_path.parent.mkdir(parents=True, exist_ok=True)
            with open(settings.google_token_path, "w") as token:
                token.write(creds.to_json())

        return creds

    @property
    def service(self):
        """Get or create the Sheets API service."""
        if self._service is None:
            self._credentials = self._get_credentials()
            self._service = build("sheets", "v4", credentials=self._credentials)
        return self._service

    def get_sheet_titles(self, spreadsheet_id: str) -> list[str]:
        """List sheet titles in display order."""
        try:
            result = self.service.spreadsheets().get(spreadsheetId=spreadsheet_id).execute()
        except HttpError as e:
            raise RuntimeError(f"Failed to get spreadsheet info: {e}")
        return [sheet["properties"]["title"] for sheet in result.get("sheets", [])]

    def _read_grid(self, spreadsheet_id: str, title: str, render_option: str) -> list[list[Any]]:
        try:
            result = (
                self.service.spreadsheets()
                .values()
                .get(
                    spreadsheetId=spreadsheet_id,
                    range=_quote_sheet(title),
                    valueRenderOption=render_option,
                )
                .execute()
            )
        except HttpError as e:
            raise RuntimeError(f"Failed to read sheet '{title}': {e}")
        return result.get("values", [])

    def load(self, source: str) -> Workbook:
        """
        Load every sheet of a spreadsheet into a Workbook.

        Args:
            source: The spreadsheet ID

        Returns:
            Decoded Workbook
        """
        workbook = Workbook()
        for title in self.get_sheet_titles(source):
            values = self._read_grid(source, title, "UNFORMATTED_VALUE")
            formulas = self._read_grid(source, title, "FORMULA")
            sheet = Sheet(name=title)

            for row_idx, row_values in enumerate(values):
                for col_idx, value in enumerate(row_values):
                    formula = None
                    if row_idx < len(formulas) and col_idx < len(formulas[row_idx]):
                        formula_value = formulas[row_idx][col_idx]
                        if isinstance(formula_value, str) and formula_value.startswith("="):
                            formula = formula_value[1:]

                    if formula is not None:
                        sheet.set_cell(row_idx, col_idx, Cell.from_formula(formula, value=value))
                    elif value != "":
                        sheet.set_cell(row_idx, col_idx, Cell.from_scalar(value))

            workbook.add_sheet(sheet)
            logger.info(f"Loaded sheet '{title}' with {len(sheet)} cells")

        return workbook

    def save(self, workbook: Workbook, target: str) -> None:
        """
        Write each sheet's extent back to an existing spreadsheet.

        Sheets must already exist in the target spreadsheet. Blank cells
        inside the extent are cleared.
        """
        data = []
        for sheet in workbook:
            if sheet.extent is None:
                continue
            grid = []
            for row in sheet.extent.rows:
                grid_row = []
                for col in sheet.extent.columns:
                    cell = sheet.get_cell(row, col)
                    if cell is None:
                        grid_row.append("")
                    elif cell.formula is not None:
                        grid_row.append(f"={cell.formula}")
                    else:
                        grid_row.append("" if cell.value is None else cell.value)
                grid.append(grid_row)
            data.append({"range": f"{_quote_sheet(sheet.name)}!{sheet.extent.ref}", "values": grid})

        if not data:
            return

        body = {
            "valueInputOption": "USER_ENTERED",
            "data": data,
        }
        try:
            result = (
                self.service.spreadsheets()
                .values()
                .batchUpdate(spreadsheetId=target, body=body)
                .execute()
            )
        except HttpError as e:
            raise RuntimeError(f"Failed to write spreadsheet: {e}")

        logger.info(
            f"Updated {result.get('totalUpdatedCells', 0)} cells in {len(data)} sheets of {target}"
        )
