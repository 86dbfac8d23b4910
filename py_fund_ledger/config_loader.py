import json
import logging
import os
from dataclasses import dataclass, field
from typing import List

from .csv_codec import HEADER_TOKENS
from .equity_curve import EQUITY_POINT_CAP
from .ledger import SALE_MARKERS
from .realized_pnl import PNL_BAR_CAP
from .types import Period, PnlMode


@dataclass
class LedgerConfig:
    equity_point_cap: int = EQUITY_POINT_CAP
    pnl_bar_cap: int = PNL_BAR_CAP
    default_period: Period = Period.ONE_YEAR
    default_pnl_mode: PnlMode = PnlMode.MONTHLY
    header_tokens: List[str] = field(default_factory=lambda: list(HEADER_TOKENS))
    sale_markers: List[str] = field(default_factory=lambda: list(SALE_MARKERS))


def _positive_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    logging.warning(f"Invalid {key} '{value}' in config. Using {default}.")
    return default


def _token_list(data: dict, key: str, default: List[str]) -> List[str]:
    value = data.get(key, default)
    if isinstance(value, list) and value and all(isinstance(v, str) and v for v in value):
        return value
    logging.warning(f"Invalid {key} in config. Using defaults.")
    return default


def load_config(config_path: str = "fund_ledger.json") -> LedgerConfig:
    """
    Loads chart caps, default filters and CSV import tokens.
    A missing file gives defaults; a bad entry falls back to its default.
    """
    config = LedgerConfig()

    if not os.path.exists(config_path):
        logging.info(f"Config file {config_path} not found. Using defaults.")
        return config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logging.error(f"Failed to load config file {config_path}: {e}")
        return config

    if not isinstance(data, dict):
        logging.warning(f"Config file {config_path} is not a JSON object. Using defaults.")
        return config

    config.equity_point_cap = _positive_int(data, "equity_point_cap", config.equity_point_cap)
    config.pnl_bar_cap = _positive_int(data, "pnl_bar_cap", config.pnl_bar_cap)

    if "default_period" in data:
        try:
            config.default_period = Period(str(data["default_period"]).upper())
        except ValueError:
            logging.warning(f"Unknown default_period '{data['default_period']}'. Using {config.default_period.value}.")

    if "default_pnl_mode" in data:
        try:
            config.default_pnl_mode = PnlMode(str(data["default_pnl_mode"]).lower())
        except ValueError:
            logging.warning(f"Unknown default_pnl_mode '{data['default_pnl_mode']}'. Using {config.default_pnl_mode.value}.")

    config.header_tokens = [t.lower() for t in _token_list(data, "header_tokens", config.header_tokens)]
    config.sale_markers = [m.upper() for m in _token_list(data, "sale_markers", config.sale_markers)]

    return config
