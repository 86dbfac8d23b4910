#!/usr/bin/env python3
"""
Run Fund Report - positions, PnL and drawdown from a transaction CSV

Usage:
    python run_fund_report.py report ledger.csv --prices prices.json
    python run_fund_report.py add ledger.csv --instrument HOY --kind SELL --units 20 --price 1,20
    python run_fund_report.py set-price prices.json HOY 1,30
    python run_fund_report.py export ledger.csv -o clean.csv
"""
import sys

from py_fund_ledger.fund_report import main

if __name__ == "__main__":
    sys.exit(main())
