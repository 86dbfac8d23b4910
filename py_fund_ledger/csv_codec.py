import csv
import io
import logging
from typing import Iterable, List, Sequence, Tuple

from .ledger import SALE_MARKERS, kind_from_token, new_id, normalize_instrument, sort_by_date
from .number_parser import filter_decimal_input, parse_decimal
from .types import Transaction

FIELDNAMES = ['date', 'instrument', 'kind', 'units', 'price']

# A first line containing any of these (lower-cased) is treated as a header
HEADER_TOKENS = ("date", "instrument", "kind", "tarih", "fon", "tip")


def export_csv(transactions: Iterable[Transaction]) -> str:
    """ Header plus one row per transaction, ascending by date, plain decimal notation. """
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=FIELDNAMES, lineterminator="\n")
    writer.writeheader()

    for t in sort_by_date(transactions):
        writer.writerow({
            'date': t.date,
            'instrument': t.instrument,
            'kind': t.kind.value,
            'units': format(t.units, "f"),
            'price': format(t.price, "f"),
        })

    return output.getvalue()


def _data_lines(text: str, header_tokens: Sequence[str]) -> Tuple[str, List[str]]:
    """ Delimiter and the non-blank lines after an optional header line. """
    lines = [line.strip() for line in (text or "").splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return ",", []

    delimiter = ";" if ";" in lines[0] else ","
    head = lines[0].lower()
    has_header = any(token in head for token in header_tokens)
    return delimiter, (lines[1:] if has_header else lines)


def count_data_rows(text: str, header_tokens: Sequence[str] = HEADER_TOKENS) -> int:
    """ Rows import_csv would consider, accepted or not. """
    return len(_data_lines(text, header_tokens)[1])


def import_csv(
    text: str,
    header_tokens: Sequence[str] = HEADER_TOKENS,
    sale_markers: Sequence[str] = SALE_MARKERS,
) -> List[Transaction]:
    """
    Parses 'date,instrument,kind,units,price' rows (',' or ';' separated).

    Rows with an empty instrument or date, fewer than five fields, or a
    number that does not parse are dropped whole. Never raises; the length
    of the result is the accepted row count.
    """
    delimiter, data_lines = _data_lines(text, header_tokens)
    if not data_lines:
        return []

    result = []
    dropped = 0
    for line in data_lines:
        # One reader per line so a stray quote cannot swallow the rest of the file
        try:
            parts = [p.strip() for p in next(csv.reader([line], delimiter=delimiter))]
        except csv.Error:
            dropped += 1
            continue
        if len(parts) < 5:
            dropped += 1
            continue

        raw_date, raw_instrument, raw_kind, raw_units, raw_price = parts[:5]
        txn_date = raw_date[:10]
        instrument = normalize_instrument(raw_instrument)
        units = parse_decimal(filter_decimal_input(raw_units))
        price = parse_decimal(filter_decimal_input(raw_price))

        if not instrument or not txn_date or units is None or price is None:
            dropped += 1
            continue

        result.append(Transaction(
            id=new_id(),
            date=txn_date,
            instrument=instrument,
            kind=kind_from_token(raw_kind, sale_markers),
            units=units,
            price=price,
        ))

    logging.info(f"CSV import: {len(result)} rows accepted, {dropped} dropped.")
    return result
