from typing import Any, Dict, List, Sequence

from inventory_export.sources import InventoryContents, ItemDescription, RawHolding

InventoryRow = Dict[str, Any]

UNKNOWN = "Unknown"


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def join_descriptions(
    holdings: Sequence[RawHolding],
    descriptions: Sequence[ItemDescription],
) -> List[InventoryRow]:
    """One row per holding, in holding order; unmatched holdings get "Unknown"/"No" metadata."""
    by_key = {d.key: d for d in descriptions}
    rows: List[InventoryRow] = []
    for h in holdings:
        d = by_key.get(h.key)
        row: InventoryRow = {
            "Item Name": (d.name if d else None) or UNKNOWN,
            "Type": (d.type if d else None) or UNKNOWN,
            "Amount": h.amount,
            "Tradable": _yes_no(d.tradable) if d else "No",
            "Marketable": _yes_no(d.marketable) if d else "No",
            "Class ID": h.class_key,
            "Instance ID": h.instance_key,
        }
        row.update(h.fields)
        rows.append(row)
    return rows


def flatten_holdings(holdings: Sequence[RawHolding]) -> List[InventoryRow]:
    # backends without descriptions key holdings by (defindex, quality)
    rows: List[InventoryRow] = []
    for h in holdings:
        row: InventoryRow = {
            "Definition Index": h.class_key,
            "Quality": h.instance_key,
            "Quantity": h.amount,
        }
        row.update(h.fields)
        rows.append(row)
    return rows


def build_rows(contents: InventoryContents) -> List[InventoryRow]:
    if contents.descriptions is None:
        return flatten_holdings(contents.holdings)
    return join_descriptions(contents.holdings, contents.descriptions)
