import argparse
import json
import logging
import os
import sys
from datetime import date
from typing import List, Optional

from .config_loader import LedgerConfig, load_config
from .csv_codec import count_data_rows, export_csv, import_csv
from .ledger import build_transaction
from .number_parser import filter_decimal_input, fmt2, parse_decimal
from .price_book import apply_price_draft, prices_from_json, prices_to_json
from .report import build_report, journal_frame, positions_frame
from .types import FundLedgerError, Period, PnlMode, Transaction, TransactionKind

# Setup Logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)


def _read_text(path: str) -> str:
    with open(path, 'r', encoding='utf-8-sig') as f:
        return f.read()


def _write_text(path: str, text: str) -> None:
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(text)


def _read_prices(path: str) -> dict:
    if not os.path.exists(path):
        logging.info(f"Price file {path} not found. All instruments are unpriced.")
        return {}
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise FundLedgerError(f"Price file {path} must contain a JSON object")
    return prices_from_json(data)


def _sale_markers(config: LedgerConfig) -> List[str]:
    # export_csv writes SELL, so a rewritten ledger must read back the same way
    markers = list(config.sale_markers)
    if TransactionKind.SELL.value not in markers:
        markers.append(TransactionKind.SELL.value)
    return markers


def _load_ledger(path: str, config: LedgerConfig, strict: bool = False) -> List[Transaction]:
    """
    Imports a ledger CSV with the configured tokens.

    With strict=True any rejected row raises FundLedgerError, so a ledger is
    never rewritten with rows missing.
    """
    text = _read_text(path)
    transactions = import_csv(text, config.header_tokens, _sale_markers(config))
    total = count_data_rows(text, config.header_tokens)
    if len(transactions) < total:
        message = f"{total - len(transactions)} of {total} rows in {path} could not be read"
        if strict:
            raise FundLedgerError(f"{message}. Fix them before rewriting the ledger.")
        logging.warning(f"{message} and were skipped.")
    return transactions


def cmd_report(args) -> int:
    config = load_config(args.config)
    transactions = _load_ledger(args.ledger, config)
    prices = _read_prices(args.prices)

    period = Period(args.period) if args.period else None
    pnl_mode = PnlMode(args.pnl_mode) if args.pnl_mode else None
    today = date.fromisoformat(args.as_of) if args.as_of else None

    report = build_report(transactions, prices, period, pnl_mode, today, config)

    print("--- Positions ---")
    if report.rows:
        print(positions_frame(report).to_string(index=False))
    else:
        print("No transactions.")

    t = report.totals
    print("--- Totals ---")
    print(f"Cost: {fmt2(t.total_cost)}  Value: {fmt2(t.total_value)}  Realized: {fmt2(t.total_realized)}")
    print(f"PnL: {fmt2(t.pnl)}  Return %: {fmt2(t.pct)}")
    print(f"Max Drawdown %: {report.max_drawdown:.2f}")

    print("--- Realized PnL ---")
    for bar in report.pnl_bars:
        print(f"{bar.label}: {fmt2(bar.value)}")

    if args.journal:
        journal_frame(report).to_csv(args.journal, sep=";", index=False, float_format="%.2f")
        logging.info(f"Journal written to {args.journal}")
    return 0


def cmd_export(args) -> int:
    config = load_config(args.config)
    transactions = _load_ledger(args.ledger, config)
    _write_text(args.output, export_csv(transactions))
    logging.info(f"Exported {len(transactions)} transactions to {args.output}")
    return 0


def cmd_add(args) -> int:
    config = load_config(args.config)
    markers = _sale_markers(config)
    txn = build_transaction(args.instrument, args.kind, args.units, args.price, args.date,
                            sale_markers=markers)
    transactions = _load_ledger(args.ledger, config, strict=True) if os.path.exists(args.ledger) else []
    transactions.append(txn)
    _write_text(args.ledger, export_csv(transactions))
    logging.info(f"Added {txn.kind.value} {txn.units} {txn.instrument} @ {txn.price} on {txn.date}")
    return 0


def cmd_set_price(args) -> int:
    prices = _read_prices(args.prices)
    text = filter_decimal_input(args.value).strip()
    value = parse_decimal(text)
    if text and (value is None or value < 0):
        logging.warning(f"'{args.value}' is not a valid price. {args.prices} left unchanged.")
        return 1
    updated = apply_price_draft(prices, args.instrument, text)
    with open(args.prices, 'w', encoding='utf-8') as f:
        json.dump(prices_to_json(updated), f, indent=2)
    logging.info(f"Saved {len(updated)} prices to {args.prices}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fund Ledger - portfolio analytics from a transaction CSV")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("report", help="Positions, PnL, drawdown and realized PnL bars")
    p.add_argument("ledger", help="Transaction CSV (date,instrument,kind,units,price)")
    p.add_argument("--prices", default="prices.json", help="Current prices JSON (default: prices.json)")
    p.add_argument("--period", choices=[x.value for x in Period], help="Chart window")
    p.add_argument("--pnl-mode", choices=[x.value for x in PnlMode], help="Realized PnL grouping")
    p.add_argument("--as-of", help="Reference date YYYY-MM-DD for period filters (default: today)")
    p.add_argument("--journal", help="Write equity/drawdown journal CSV here")
    p.add_argument("--config", default="fund_ledger.json", help="Config file (default: fund_ledger.json)")
    p.set_defaults(func=cmd_report)

    p = sub.add_parser("export", help="Rewrite a ledger CSV in canonical form")
    p.add_argument("ledger")
    p.add_argument("-o", "--output", required=True)
    p.add_argument("--config", default="fund_ledger.json", help="Config file (default: fund_ledger.json)")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("add", help="Append one validated transaction to a ledger CSV")
    p.add_argument("ledger")
    p.add_argument("--instrument", required=True)
    p.add_argument("--kind", default="BUY", help="BUY or SELL")
    p.add_argument("--units", required=True)
    p.add_argument("--price", required=True)
    p.add_argument("--date", default=date.today().isoformat())
    p.add_argument("--config", default="fund_ledger.json", help="Config file (default: fund_ledger.json)")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("set-price", help="Set (or clear with '') an instrument's current price")
    p.add_argument("prices")
    p.add_argument("instrument")
    p.add_argument("value")
    p.set_defaults(func=cmd_set_price)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except FundLedgerError as e:
        logging.error(str(e))
    except (OSError, json.JSONDecodeError) as e:
        logging.error(f"File error: {e}")
    except ValueError as e:
        # Bad --as-of date
        logging.error(f"Invalid argument: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
