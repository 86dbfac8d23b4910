import logging
from decimal import Decimal
from typing import Any, Dict, Mapping

from .ledger import normalize_instrument
from .number_parser import filter_decimal_input, parse_decimal


def apply_price_draft(prices: Mapping[str, Decimal], instrument: str, raw: str) -> Dict[str, Decimal]:
    """
    Applies a typed price to a copy of the price map.

    Empty text removes the price (instrument becomes unpriced). Text that is
    not a valid price ('1,2,', '-') leaves the map as it was, so a half-typed
    value is never committed.
    """
    result = dict(prices)
    code = normalize_instrument(instrument)
    text = filter_decimal_input(raw).strip()

    if not text:
        result.pop(code, None)
        return result

    value = parse_decimal(text)
    if value is None or value < 0:
        return result
    result[code] = value
    return result


def apply_price_drafts(prices: Mapping[str, Decimal], drafts: Mapping[str, str]) -> Dict[str, Decimal]:
    """ Bulk form of apply_price_draft. """
    result = dict(prices)
    for instrument, raw in drafts.items():
        result = apply_price_draft(result, instrument, raw)
    return result


def price_drafts(prices: Mapping[str, Decimal]) -> Dict[str, str]:
    """ Prices as editable text with a comma decimal separator. """
    return {code: format(value, "f").replace(".", ",") for code, value in prices.items()}


def prices_from_json(data: Mapping[str, Any]) -> Dict[str, Decimal]:
    """
    Builds a price map from decoded JSON. Values may be numbers or
    locale strings; unreadable entries are skipped.
    """
    prices = {}
    for instrument, raw in data.items():
        value = parse_decimal(str(raw)) if raw is not None else None
        if value is None or value < 0:
            logging.warning(f"Skipping price for {instrument}: '{raw}' is not a valid price")
            continue
        prices[normalize_instrument(instrument)] = value
    return prices


def prices_to_json(prices: Mapping[str, Decimal]) -> Dict[str, str]:
    return {code: format(value, "f") for code, value in sorted(prices.items())}
