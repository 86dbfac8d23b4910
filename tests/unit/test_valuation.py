import unittest
from decimal import Decimal

from py_fund_ledger.position_engine import compute_positions
from py_fund_ledger.types import PositionSnapshot, Transaction, TransactionKind
from py_fund_ledger.valuation import portfolio_totals, value_position, value_positions


def hoy_positions():
    log = [
        Transaction("1", "2025-01-10", "HOY", TransactionKind.BUY, Decimal("100"), Decimal("1.00")),
        Transaction("2", "2025-02-03", "HOY", TransactionKind.SELL, Decimal("20"), Decimal("1.20")),
    ]
    return compute_positions(log)


class TestValuation(unittest.TestCase):

    def test_priced_row(self):
        [row] = value_positions(hoy_positions(), {"HOY": Decimal("1.30")})
        self.assertEqual(row.current_value, Decimal("104.00"))
        self.assertEqual(row.unrealized_pnl, Decimal("24.00"))
        self.assertEqual(row.total_pnl, Decimal("28.00"))
        self.assertEqual(row.return_pct, Decimal("35.00"))

    def test_unpriced_row_is_unknown_not_zero(self):
        [row] = value_positions(hoy_positions(), {})
        self.assertEqual(row.instrument, "HOY")
        self.assertIsNone(row.price)
        self.assertIsNone(row.current_value)
        self.assertIsNone(row.unrealized_pnl)
        self.assertIsNone(row.total_pnl)
        self.assertIsNone(row.return_pct)
        self.assertEqual(row.realized_pnl, Decimal("4.00"))

    def test_return_unknown_without_cost(self):
        closed = PositionSnapshot(instrument="OLD", realized_pnl=Decimal("3"))
        row = value_position(closed, Decimal("2"))
        self.assertEqual(row.current_value, Decimal("0"))
        self.assertEqual(row.total_pnl, Decimal("3"))
        self.assertIsNone(row.return_pct)

    def test_rows_sorted_by_instrument(self):
        positions = {
            "ZZZ": PositionSnapshot(instrument="ZZZ"),
            "AAA": PositionSnapshot(instrument="AAA"),
        }
        self.assertEqual([r.instrument for r in value_positions(positions, {})], ["AAA", "ZZZ"])


class TestTotals(unittest.TestCase):

    def test_totals_with_partial_prices(self):
        positions = {
            "AAA": PositionSnapshot("AAA", Decimal("10"), Decimal("10"), Decimal("1"), Decimal("2")),
            "BBB": PositionSnapshot("BBB", Decimal("5"), Decimal("40"), Decimal("8"), Decimal("-1")),
        }
        totals = portfolio_totals(value_positions(positions, {"AAA": Decimal("1.5")}))
        self.assertEqual(totals.total_cost, Decimal("50"))
        self.assertEqual(totals.total_value, Decimal("15"))
        self.assertEqual(totals.total_realized, Decimal("1"))
        self.assertTrue(totals.any_price)
        # 15 - 50 + 1
        self.assertEqual(totals.pnl, Decimal("-34"))
        self.assertEqual(totals.pct, Decimal("-68"))

    def test_totals_unknown_without_any_price(self):
        totals = portfolio_totals(value_positions(hoy_positions(), {}))
        self.assertFalse(totals.any_price)
        self.assertIsNone(totals.pnl)
        self.assertIsNone(totals.pct)
        self.assertEqual(totals.total_value, Decimal("0"))

    def test_empty(self):
        totals = portfolio_totals([])
        self.assertEqual(totals.total_cost, Decimal("0"))
        self.assertIsNone(totals.pnl)


if __name__ == '__main__':
    unittest.main()
