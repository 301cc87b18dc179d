import unittest
from datetime import date, datetime, timezone
from io import BytesIO
from types import SimpleNamespace

from openpyxl import load_workbook

from storefront.services.report_service import build_stock_workbook


class StockWorkbookTest(unittest.TestCase):
    def test_workbook_sheets_and_rows(self):
        product = SimpleNamespace(id=1, name="Rice", category="grain")
        batch = SimpleNamespace(
            batch_number="B1",
            quantity=4,
            purchase_price=40.0,
            expiry_date=date(2025, 1, 1),
            created_at=datetime(2024, 6, 1, 10, 30, tzinfo=timezone.utc),
        )
        aggregates = [
            {
                "product": product,
                "total_quantity": 4,
                "total_value": 160.0,
                "godown_breakdown": [
                    {
                        "godown": {"id": 1, "name": "Micro A", "godown_type": "micro", "is_active": True},
                        "quantity": 4,
                        "batches": [batch],
                    }
                ],
                "reorder_level": 5,
                "status": "low_stock",
                "order_count": 0,
                "order_quantity": 0,
                "demand_score": 0,
            }
        ]
        stats = {"in_stock": 0, "low_stock": 1, "out_of_stock": 0, "total_value": 160.0}

        workbook = load_workbook(BytesIO(build_stock_workbook(aggregates, stats)))
        self.assertEqual(workbook.sheetnames, ["Stock", "Batches", "Summary"])

        stock = workbook["Stock"]
        self.assertEqual(stock["A1"].value, "Product ID")
        self.assertTrue(stock["A1"].font.bold)
        self.assertEqual(stock["B2"].value, "Rice")
        self.assertEqual(stock["G2"].value, "low_stock")

        batches = workbook["Batches"]
        self.assertEqual(batches["C2"].value, "Micro A")
        self.assertEqual(batches["F2"].value, 4)
        self.assertEqual(batches["I2"].value, datetime(2024, 6, 1, 10, 30))

        summary = workbook["Summary"]
        self.assertEqual(summary["B3"].value, 1)

    def test_without_stats(self):
        workbook = load_workbook(BytesIO(build_stock_workbook([])))
        self.assertEqual(workbook.sheetnames, ["Stock", "Batches"])
        self.assertEqual(workbook["Stock"].max_row, 1)


if __name__ == "__main__":
    unittest.main()
