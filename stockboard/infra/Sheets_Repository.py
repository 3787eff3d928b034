"""Google Sheets persistence for cards (REST v4 API over httpx).

One row per card in the "Cards" sheet, header in row 1:
    ID | Name | Category | Store | Checked ("true"/"false") | Order (decimal string)

Every call returns a plain success value; HTTP and transport failures are
logged and reported as False / [] / None, never raised.
"""
import logging
from typing import List, Optional

import httpx

from stockboard.domain.Card import Card, Order
from stockboard.utilities.config import SHEETS_API_URL, SHEETS_TIMEOUT
from stockboard.utilities.constants import SHEET_TITLE, SPREADSHEET_TITLE, SHEET_HEADER, SHEET_ROW_COUNT

logger = logging.getLogger(__name__)

__all__ = ["SheetsRepository", "card_to_row", "row_to_card", "parse_order", "format_order"]

DATA_RANGE = f"{SHEET_TITLE}!A2:F"
ID_RANGE = f"{SHEET_TITLE}!A2:A"
HEADER_RANGE = f"{SHEET_TITLE}!A1:F1"


def format_order(order: Order) -> str:
    if isinstance(order, float) and order.is_integer():
        return str(int(order))
    return str(order)


def parse_order(value) -> Order:
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return 0
    return int(number) if number.is_integer() else number


def card_to_row(card: Card) -> List[str]:
    return [
        card.id,
        card.name,
        card.category,
        card.store,
        "true" if card.checked else "false",
        format_order(card.order),
    ]


def row_to_card(row) -> Optional[Card]:
    '''Row (list of cell strings) to Card; None for rows without an id.'''
    cells = [str(c) for c in (row or [])] + [""] * 6
    if not cells[0].strip():
        return None
    return Card(
        id=cells[0],
        name=cells[1],
        category=cells[2],
        store=cells[3],
        checked=cells[4].strip().lower() == "true",
        order=parse_order(cells[5]),
    )


class SheetsRepository:
    """Card CRUD against one spreadsheet, authorized by a bearer token."""

    def __init__(self, spreadsheet_id: Optional[str], access_token: str,
                 client: Optional[httpx.Client] = None, base_url: str = SHEETS_API_URL):
        self.spreadsheet_id = spreadsheet_id
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=SHEETS_TIMEOUT)

    @property
    def _headers(self):
        return {"Authorization": f"Bearer {self.access_token}"}

    def _values_url(self, a1_range: str) -> str:
        return f"{self.base_url}/{self.spreadsheet_id}/values/{a1_range}"

    def close(self):
        self._client.close()

    def create_spreadsheet(self) -> Optional[str]:
        """Create a spreadsheet with the Cards sheet and header row; returns its id."""
        body = {
            "properties": {"title": SPREADSHEET_TITLE},
            "sheets": [{
                "properties": {
                    "title": SHEET_TITLE,
                    "gridProperties": {"rowCount": SHEET_ROW_COUNT, "columnCount": len(SHEET_HEADER)},
                }
            }],
        }
        try:
            resp = self._client.post(self.base_url, json=body, headers=self._headers)
            resp.raise_for_status()
            spreadsheet_id = resp.json()["spreadsheetId"]
            self.spreadsheet_id = spreadsheet_id
            header = self._client.put(
                self._values_url(HEADER_RANGE),
                json={"values": [SHEET_HEADER]},
                params={"valueInputOption": "RAW"},
                headers=self._headers,
            )
            header.raise_for_status()
            logger.info("Created spreadsheet %s", spreadsheet_id)
            return spreadsheet_id
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("Failed to create spreadsheet: %s", e)
            return None

    def list(self) -> List[Card]:
        if not self.spreadsheet_id:
            return []
        try:
            resp = self._client.get(self._values_url(DATA_RANGE), headers=self._headers)
            resp.raise_for_status()
            rows = resp.json().get("values") or []
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch cards: %s", e)
            return []
        cards = [row_to_card(row) for row in rows]
        return [c for c in cards if c is not None]

    def create(self, card: Card) -> bool:
        if not self.spreadsheet_id:
            return False
        try:
            resp = self._client.post(
                self._values_url(f"{DATA_RANGE}:append"),
                json={"values": [card_to_row(card)]},
                params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
                headers=self._headers,
            )
            resp.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.error("Failed to save card %s: %s", card.id, e)
            return False

    def _row_index(self, card_id: str) -> Optional[int]:
        '''Zero-based index of the card among data rows (row 2 is index 0).'''
        resp = self._client.get(self._values_url(ID_RANGE), headers=self._headers)
        resp.raise_for_status()
        rows = resp.json().get("values") or []
        for index, row in enumerate(rows):
            if row and row[0] == card_id:
                return index
        return None

    def update(self, card: Card) -> bool:
        if not self.spreadsheet_id:
            return False
        try:
            index = self._row_index(card.id)
            if index is None:
                logger.warning("Card %s not found in sheet; update skipped", card.id)
                return False
            row_number = index + 2
            resp = self._client.put(
                self._values_url(f"{SHEET_TITLE}!A{row_number}:F{row_number}"),
                json={"values": [card_to_row(card)]},
                params={"valueInputOption": "RAW"},
                headers=self._headers,
            )
            resp.raise_for_status()
            return True
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to update card %s: %s", card.id, e)
            return False

    def delete(self, card_id: str) -> bool:
        if not self.spreadsheet_id:
            return False
        try:
            index = self._row_index(card_id)
            if index is None:
                logger.warning("Card %s not found in sheet; delete skipped", card_id)
                return False
            body = {
                "requests": [{
                    "deleteDimension": {
                        "range": {
                            "sheetId": 0,
                            "dimension": "ROWS",
                            "startIndex": index + 1,
                            "endIndex": index + 2,
                        }
                    }
                }]
            }
            resp = self._client.post(
                f"{self.base_url}/{self.spreadsheet_id}:batchUpdate", json=body, headers=self._headers
            )
            resp.raise_for_status()
            return True
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to delete card %s: %s", card_id, e)
            return False
