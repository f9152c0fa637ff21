"""CSV item import for a collection.

Expected header (any order, case-insensitive): name, description, starting_bid, inventory.
`description` is optional. Quoted fields with doubled quotes ("") are supported.
The whole file is validated before anything is written; one bad field rejects
the import with every problem listed (row numbers are 1-based data rows).
"""

import csv
import io

from src.qa_auction.domain.models import NewItem
from src.qa_common.cents import parse_money
from src.qa_common.errors import InvalidItemImportError

REQUIRED_COLUMNS = ("name", "starting_bid", "inventory")


def _error(row: int, field: str, value: str, message: str) -> dict[str, object]:
    return {"row": row, "field": field, "value": value, "error": message}


def _cell(raw: list[str], index: dict[str, int], column: str) -> str:
    pos = index.get(column)
    return raw[pos].strip() if pos is not None and pos < len(raw) else ""


def parse_items_csv(content: str) -> list[NewItem]:
    reader = csv.reader(io.StringIO(content), skipinitialspace=True)
    # Blank lines outside quotes are skipped; newlines inside quoted fields survive.
    rows = [raw for raw in reader if any(cell.strip() for cell in raw)]
    if not rows:
        raise InvalidItemImportError([_error(0, "file", "", "CSV file is empty")])

    header = [h.strip().lower() for h in rows[0]]
    missing = [col for col in REQUIRED_COLUMNS if col not in header]
    if missing:
        raise InvalidItemImportError(
            [_error(0, col, "", f"Missing required column: {col}") for col in missing]
        )
    index = {name: pos for pos, name in enumerate(header)}

    items: list[NewItem] = []
    errors: list[dict[str, object]] = []
    for row_number, raw in enumerate(rows[1:], start=1):
        name = _cell(raw, index, "name")
        description = _cell(raw, index, "description") or None
        starting_bid_raw = _cell(raw, index, "starting_bid")
        inventory_raw = _cell(raw, index, "inventory")
        row_errors: list[dict[str, object]] = []

        if not name:
            row_errors.append(_error(row_number, "name", name, "Name is required"))

        starting_bid = 0
        if not starting_bid_raw:
            row_errors.append(
                _error(row_number, "starting_bid", "", "Starting bid is required")
            )
        else:
            try:
                starting_bid = parse_money(starting_bid_raw)
            except ValueError:
                starting_bid = 0
            if starting_bid <= 0:
                row_errors.append(
                    _error(
                        row_number,
                        "starting_bid",
                        starting_bid_raw,
                        "Starting bid must be a positive amount with at most 2 decimals",
                    )
                )

        inventory = 0
        if not inventory_raw:
            row_errors.append(_error(row_number, "inventory", "", "Inventory is required"))
        else:
            inventory = int(inventory_raw) if inventory_raw.isdigit() else 0
            if inventory < 1:
                row_errors.append(
                    _error(
                        row_number,
                        "inventory",
                        inventory_raw,
                        "Inventory must be a positive integer",
                    )
                )

        if row_errors:
            errors.extend(row_errors)
        else:
            items.append(
                NewItem(
                    name=name,
                    description=description,
                    starting_bid=starting_bid,
                    inventory=inventory,
                )
            )

    if errors:
        raise InvalidItemImportError(errors)
    if not items:
        raise InvalidItemImportError([_error(0, "file", "", "CSV file has no data rows")])
    return items
