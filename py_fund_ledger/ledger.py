import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .number_parser import filter_decimal_input, parse_decimal
from .types import InvalidTransactionError, Transaction, TransactionKind

# Any kind token containing one of these (case-insensitive) is a sale
SALE_MARKERS = ("SELL", "SAT")


def new_id() -> str:
    return uuid.uuid4().hex


def normalize_instrument(raw: Optional[str]) -> str:
    """ ' hoy  x ' -> 'HOYX' """
    return "".join((raw or "").split()).upper()


def kind_from_token(token: Any, sale_markers: Sequence[str] = SALE_MARKERS) -> TransactionKind:
    if isinstance(token, TransactionKind):
        return token
    text = str(token or "").upper()
    if any(marker.upper() in text for marker in sale_markers):
        return TransactionKind.SELL
    return TransactionKind.BUY


def sort_by_date(transactions: Iterable[Transaction]) -> List[Transaction]:
    """ Ascending by date. sorted() is stable, so same-date records keep insertion order. """
    return sorted(transactions, key=lambda t: t.date)


def list_instruments(transactions: Iterable[Transaction]) -> List[str]:
    return sorted({t.instrument for t in transactions if t.instrument})


def remove_transaction(transactions: Iterable[Transaction], txn_id: str) -> List[Transaction]:
    return [t for t in transactions if t.id != txn_id]


def build_transaction(
    instrument: str,
    kind: Union[TransactionKind, str],
    units_text: str,
    price_text: str,
    txn_date: str,
    txn_id: Optional[str] = None,
    sale_markers: Sequence[str] = SALE_MARKERS,
) -> Transaction:
    """
    Validates manually entered fields and creates a Transaction.

    Number fields go through the draft filter first, so '1,0000' and
    '100 ' are accepted.

    Raises:
        InvalidTransactionError: with the reason of the first failed check.
    """
    code = normalize_instrument(instrument)
    units = parse_decimal(filter_decimal_input(units_text))
    price = parse_decimal(filter_decimal_input(price_text))
    txn_date = (txn_date or "").strip()

    if not code:
        raise InvalidTransactionError("Instrument code is required")
    if not txn_date:
        raise InvalidTransactionError("Date is required")
    if units is None or units <= 0:
        raise InvalidTransactionError(f"Invalid units: '{units_text}'")
    if price is None or price < 0:
        raise InvalidTransactionError(f"Invalid price: '{price_text}'")

    return Transaction(
        id=txn_id or new_id(),
        date=txn_date,
        instrument=code,
        kind=kind_from_token(kind, sale_markers),
        units=units,
        price=price,
    )


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    # str() first so a float 1.2 stays 1.2 instead of its binary expansion
    return parse_decimal(str(value))


def transactions_from_records(records: Iterable[Dict[str, Any]]) -> List[Transaction]:
    """
    Rebuilds Transactions from stored dictionaries (persistence layer format).
    Missing id gets a fresh one and missing date is today. A record whose
    units are not a positive number or whose price is not a number >= 0 is
    skipped with a warning.
    """
    result = []
    for rec in records:
        units = _to_decimal(rec.get("units"))
        price = _to_decimal(rec.get("price"))
        if units is None or units <= 0 or price is None or price < 0:
            logging.warning(f"Skipping stored record {rec.get('id')}: "
                            f"units '{rec.get('units')}', price '{rec.get('price')}'")
            continue
        result.append(Transaction(
            id=str(rec.get("id") or new_id()),
            date=str(rec.get("date") or date.today().isoformat()),
            instrument=normalize_instrument(str(rec.get("instrument") or "")),
            kind=kind_from_token(rec.get("kind")),
            units=units,
            price=price,
        ))
    return result


def transaction_to_record(t: Transaction) -> Dict[str, Any]:
    return {
        "id": t.id,
        "date": t.date,
        "instrument": t.instrument,
        "kind": t.kind.value,
        "units": format(t.units, "f"),
        "price": format(t.price, "f"),
    }
