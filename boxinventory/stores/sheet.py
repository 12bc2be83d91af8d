"""Spreadsheet-backed inventory store.

Reads a published Google Sheet through the Visualization API
(``/gviz/tq?tqx=out:json&headers=1``), whose JSON comes wrapped in a
JSONP-style call. Writes go to an Apps Script web app that accepts the
whole sheet as a JSON array of ``[box_id, item_id, item_name, item_tags]``
rows and answers ``{"status": "success"}``.
"""
import json
import logging
from typing import Any, List, Optional

import httpx

from boxinventory.exceptions import StoreReadFailure, StoreWriteFailure
from boxinventory.schemas.record import InventoryRecord
from boxinventory.services.records import RECORD_FIELDS
from boxinventory.stores.base import InventoryStore

logger = logging.getLogger(__name__)


def _cell_text(row: List[Any], index: int) -> str:
    if index >= len(row) or not row[index]:
        return ""
    value = row[index].get("v")
    if value is None:
        return ""
    # Numeric cells come back as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_gviz_response(text: str) -> List[InventoryRecord]:
    """Parse a gviz JSON response into records, locating columns by header label.

    Any unexpected payload shape is reported as a StoreReadFailure.
    """
    start, end = text.find("("), text.rfind(")")
    if start == -1 or end <= start:
        raise StoreReadFailure("Unexpected response format from sheet")
    try:
        data = json.loads(text[start + 1:end])
    except ValueError as e:
        raise StoreReadFailure(f"Malformed sheet response: {e}") from e
    if not isinstance(data, dict):
        raise StoreReadFailure("Unexpected response format from sheet")

    try:
        return _parse_gviz_table(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise StoreReadFailure(f"Unexpected sheet payload: {e}") from e


def _parse_gviz_table(data: dict) -> List[InventoryRecord]:
    if data.get("status") == "error":
        messages = [err.get("detailed_message") or err.get("message", "") for err in data.get("errors", [])]
        raise StoreReadFailure("Sheet API error: " + "; ".join(messages))
    
    table = data.get("table") or {}
    labels = [(col.get("label") or "").strip().lower() for col in table.get("cols", [])]
    missing = [name for name in RECORD_FIELDS if name not in labels]
    if missing:
        raise StoreReadFailure(
            "Sheet is missing required headers: " + ", ".join(missing)
        )
    indexes = {name: labels.index(name) for name in RECORD_FIELDS}
    
    records = []
    for row in table.get("rows") or []:
        cells = row.get("c") or []
        records.append(InventoryRecord(**{
            name: _cell_text(cells, index) for name, index in indexes.items()
        }))
    return records


class SheetStore(InventoryStore):
    """Inventory store backed by a spreadsheet and an Apps Script endpoint."""

    def __init__(self, read_url: str, write_url: Optional[str] = None,
                 timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.read_url = read_url
        self.write_url = write_url
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport, follow_redirects=True)

    async def load_all(self) -> List[InventoryRecord]:
        try:
            async with self._client() as client:
                response = await client.get(self.read_url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise StoreReadFailure(f"Could not reach sheet: {e}") from e
        
        records = parse_gviz_response(response.text)
        logger.debug("Read %d rows from sheet", len(records))
        return records

    async def save_all(self, records: List[InventoryRecord]) -> None:
        if not self.write_url:
            raise StoreWriteFailure("Sheet write URL is not configured")
        
        rows = [[record.box_id, record.item_id, record.item_name, record.item_tags] for record in records]
        try:
            async with self._client() as client:
                response = await client.post(
                    self.write_url,
                    content=json.dumps(rows),
                    headers={"Content-Type": "text/plain;charset=utf-8"},
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPError as e:
            raise StoreWriteFailure(f"Could not reach sheet: {e}") from e
        except ValueError as e:
            raise StoreWriteFailure(f"Malformed response from sheet: {e}") from e
        
        if not isinstance(result, dict) or result.get("status") != "success":
            message = result.get("message") if isinstance(result, dict) else None
            raise StoreWriteFailure(message or "Unknown error from sheet")
