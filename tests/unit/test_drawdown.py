import unittest
from decimal import Decimal

from py_fund_ledger.drawdown import compute_drawdown, equity_frame, max_drawdown
from py_fund_ledger.types import EquityPoint


def curve(*values):
    return [EquityPoint(date=f"2025-01-{i + 1:02d}", value=Decimal(v)) for i, v in enumerate(values)]


class TestDrawdown(unittest.TestCase):

    def test_decline_from_running_peak(self):
        series = compute_drawdown(curve("100", "120", "90", "130", "117"))
        self.assertEqual([p.date for p in series],
                         ["2025-01-01", "2025-01-02", "2025-01-03", "2025-01-04", "2025-01-05"])
        pct = [p.percent for p in series]
        self.assertEqual(pct[0], 0)
        self.assertEqual(pct[1], 0)
        self.assertAlmostEqual(pct[2], -25.0)
        self.assertEqual(pct[3], 0)
        self.assertAlmostEqual(pct[4], -10.0)

    def test_never_positive(self):
        series = compute_drawdown(curve("5", "1", "7", "3", "3", "8", "0"))
        self.assertTrue(all(p.percent <= 0 for p in series))

    def test_non_positive_peak_gives_zero(self):
        series = compute_drawdown(curve("-10", "-20", "0"))
        self.assertEqual([p.percent for p in series], [0.0, 0.0, 0.0])

    def test_max_drawdown(self):
        series = compute_drawdown(curve("100", "50", "80", "40"))
        self.assertAlmostEqual(max_drawdown(series), -60.0)
        self.assertEqual(max_drawdown([]), 0.0)

    def test_empty(self):
        self.assertEqual(compute_drawdown([]), [])
        df = equity_frame([])
        self.assertEqual(list(df.columns), ['date', 'Equity', 'Peak_Equity', 'Drawdown_Pct'])
        self.assertTrue(df.empty)

    def test_frame_columns(self):
        df = equity_frame(curve("100", "80"))
        self.assertEqual(df['Peak_Equity'].tolist(), [100.0, 100.0])
        self.assertAlmostEqual(df['Drawdown_Pct'].iloc[1], -20.0)


if __name__ == '__main__':
    unittest.main()
