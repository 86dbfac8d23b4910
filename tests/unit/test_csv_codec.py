import unittest
from decimal import Decimal

from py_fund_ledger.csv_codec import count_data_rows, export_csv, import_csv
from py_fund_ledger.types import Transaction, TransactionKind


def tx(txn_id, d, kind, units, price, instrument="HOY"):
    return Transaction(id=txn_id, date=d, instrument=instrument, kind=kind,
                       units=Decimal(units), price=Decimal(price))


def tuples(transactions):
    rows = [(t.date, t.instrument, t.kind, t.units, t.price) for t in transactions]
    return sorted(rows, key=lambda r: (r[0], r[1], r[2].value, r[3]))


class TestExport(unittest.TestCase):

    def test_header_and_sorted_rows(self):
        log = [
            tx("2", "2025-02-03", TransactionKind.SELL, "20", "1.20"),
            tx("1", "2025-01-10", TransactionKind.BUY, "100", "1.00"),
        ]
        self.assertEqual(export_csv(log), (
            "date,instrument,kind,units,price\n"
            "2025-01-10,HOY,BUY,100,1.00\n"
            "2025-02-03,HOY,SELL,20,1.20\n"
        ))

    def test_fixed_notation(self):
        text = export_csv([tx("1", "2025-01-01", TransactionKind.BUY, "1E+3", "0.0000001")])
        self.assertIn("2025-01-01,HOY,BUY,1000,0.0000001", text)

    def test_empty_log(self):
        self.assertEqual(export_csv([]), "date,instrument,kind,units,price\n")


class TestImport(unittest.TestCase):

    def test_round_trip(self):
        log = [
            tx("1", "2025-01-10", TransactionKind.BUY, "100", "1.00"),
            tx("2", "2025-02-03", TransactionKind.SELL, "20", "1.20", "ABC"),
            tx("3", "2025-02-03", TransactionKind.BUY, "0.125", "13.4567"),
        ]
        imported = import_csv(export_csv(log))
        self.assertEqual(tuples(imported), tuples(log))
        # Fresh ids on import
        self.assertFalse({t.id for t in imported} & {"1", "2", "3"})

    def test_semicolon_with_local_header_and_decimal_comma(self):
        text = (
            "tarih;fon;tip;pay;fiyat\n"
            "2025-01-10; hoy ;AL;100;1,00\n"
            "2025-02-03T10:00:00;HOY;SAT;20;1,20\n"
        )
        imported = import_csv(text)
        self.assertEqual(tuples(imported), [
            ("2025-01-10", "HOY", TransactionKind.BUY, Decimal("100"), Decimal("1.00")),
            ("2025-02-03", "HOY", TransactionKind.SELL, Decimal("20"), Decimal("1.20")),
        ])

    def test_headerless_input(self):
        imported = import_csv("2025-01-10,HOY,BUY,100,1.00\r\n\r\n2025-01-11,HOY,sell,1,2\r\n")
        self.assertEqual(len(imported), 2)
        self.assertEqual(imported[1].kind, TransactionKind.SELL)

    def test_invalid_rows_are_dropped_whole(self):
        text = (
            "date;instrument;kind;units;price\n"
            ";HOY;BUY;1;1\n"              # no date
            "2025-01-01;;BUY;1;1\n"       # no instrument
            "2025-01-01;HOY;BUY;abc;1\n"  # units not a number
            "2025-01-01;HOY;BUY;1;1,2,3\n"  # price not a number
            "2025-01-01;HOY;BUY;1\n"      # too few fields
            "2025-01-02;HOY;BUY;2;3;extra\n"
        )
        imported = import_csv(text)
        self.assertEqual(tuples(imported), [
            ("2025-01-02", "HOY", TransactionKind.BUY, Decimal("2"), Decimal("3")),
        ])

    def test_stray_quote_does_not_raise(self):
        imported = import_csv('2025-01-01,"HOY,BUY,1,1\n2025-01-02,HOY,BUY,1,1\n')
        self.assertEqual([t.date for t in imported], ["2025-01-02"])

    def test_custom_markers(self):
        imported = import_csv("2025-01-01,HOY,VENTE,1,1\n", sale_markers=("VENTE",))
        self.assertEqual(imported[0].kind, TransactionKind.SELL)

    def test_empty_text(self):
        self.assertEqual(import_csv(""), [])
        self.assertEqual(import_csv("\n \n"), [])

    def test_count_data_rows_includes_rejected_rows(self):
        text = "date,instrument,kind,units,price\n2025-01-01,HOY,BUY,1,1\n\nbad,,x,y,z\n"
        self.assertEqual(count_data_rows(text), 2)
        self.assertEqual(len(import_csv(text)), 1)
        self.assertEqual(count_data_rows("2025-01-01,HOY,BUY,1,1\n"), 1)
        self.assertEqual(count_data_rows(""), 0)


if __name__ == '__main__':
    unittest.main()
