import re
from decimal import Decimal, InvalidOperation
from typing import Optional

_NOT_NUMERIC = re.compile(r"[^0-9.\-]")
_NOT_DRAFT = re.compile(r"[^\d,.\-]")


def filter_decimal_input(raw: Optional[str]) -> str:
    """
    Keeps only digits, comma, dot and minus.
    No validation: '1,2,' stays displayable while the user is still typing.
    """
    return _NOT_DRAFT.sub("", raw or "")


def parse_decimal(raw: Optional[str]) -> Optional[Decimal]:
    """
    Parses locale-ambiguous decimal text ('1,23', '1.23', '1 234,56').

    Returns None when the cleaned text is not a number (empty, several
    separators, misplaced minus). Never raises.
    """
    text = "".join((raw or "").split()).replace(",", ".")
    text = _NOT_NUMERIC.sub("", text)
    if not text:
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def fmt2(value: Optional[Decimal]) -> str:
    """ Two decimals, '-' for unknown. """
    if value is None:
        return "-"
    return f"{value:.2f}"


def fmt4(value: Optional[Decimal]) -> str:
    if value is None:
        return "-"
    return f"{value:.4f}"
