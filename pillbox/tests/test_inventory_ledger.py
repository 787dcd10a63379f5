import unittest
from pillbox.domain.Medication import Medication
from pillbox.domain.Stock import StockLevels
from pillbox.infra.Stock_Repository import StockRepository
from pillbox.logic.inventory.ledger import InventoryLedger, compute_stock_snapshots, stock_status
from pillbox.utilities.constants import StockStatus
from pillbox.utilities.errors import StockLocationMissing, ValidationFailed
from pillbox.tests.fake_backend import FakeSupabase, seed_medication


class TestInventoryLedger(unittest.TestCase):

    def setUp(self):
        self.fake = FakeSupabase()
        self.med_id = seed_medication(self.fake, "fam", "Aspirin", ["Mattina"], on_hand=4, reserve=10)
        self.ledger = InventoryLedger(StockRepository(self.fake))

    def _levels(self):
        return self.ledger.current(self.med_id)

    def test_transfer_non_positive_is_noop(self):
        for qty in (0, -3, "0"):
            self.assertEqual(self.ledger.transfer_from_reserve(self.med_id, qty), StockLevels(4, 10))
        self.assertEqual(self.fake.count_calls("stocks", "update"), 0)

    def test_transfer_moves_pills(self):
        levels = self.ledger.transfer_from_reserve(self.med_id, 6)
        self.assertEqual(levels, StockLevels(10, 4))
        self.assertEqual(self._levels(), StockLevels(10, 4))

    def test_transfer_more_than_reserve_floors_reserve_and_credits_full_qty(self):
        levels = self.ledger.transfer_from_reserve(self.med_id, 25)
        self.assertEqual(levels.reserve, 0)
        self.assertEqual(levels.on_hand, 29)
        self.assertEqual(self._levels(), StockLevels(29, 0))

    def test_restock_reserve(self):
        self.assertEqual(self.ledger.restock_reserve(self.med_id, 30), StockLevels(4, 40))
        self.assertEqual(self.ledger.restock_reserve(self.med_id, -5), StockLevels(4, 40))

    def test_absolute_corrections(self):
        self.assertEqual(self.ledger.set_on_hand(self.med_id, "7"), StockLevels(7, 10))
        self.assertEqual(self.ledger.set_reserve(self.med_id, 0), StockLevels(7, 0))

    def test_absolute_correction_rejects_bad_input_before_backend_call(self):
        for bad in (-1, "abc", "", None, float("nan"), "2.7", 1.5):
            with self.assertRaises(ValidationFailed):
                self.ledger.set_on_hand(self.med_id, bad)
        self.assertEqual(self.fake.count_calls("stocks", "update"), 0)
        self.assertEqual(self._levels(), StockLevels(4, 10))

    def test_whole_number_strings_are_accepted(self):
        self.assertEqual(self.ledger.set_reserve(self.med_id, " 12 "), StockLevels(4, 12))
        self.assertEqual(self.ledger.set_reserve(self.med_id, "3.0"), StockLevels(4, 3))

    def test_fractional_transfer_is_rejected(self):
        with self.assertRaises(ValidationFailed):
            self.ledger.transfer_from_reserve(self.med_id, "2.7")
        self.assertEqual(self._levels(), StockLevels(4, 10))

    def test_missing_location_is_reported(self):
        self.fake.tables["stocks"] = [r for r in self.fake.tables["stocks"] if r["location"] != "Dispensa"]
        with self.assertRaises(StockLocationMissing) as ctx:
            self.ledger.transfer_from_reserve(self.med_id, 2)
        self.assertEqual(ctx.exception.location, "Dispensa")
        # Nothing was written: the on-hand row is untouched
        self.assertEqual(self._levels().on_hand, 4)

    def test_levels_default_to_zero_without_rows(self):
        levels = self.ledger.levels([self.med_id, "unknown"])
        self.assertEqual(levels["unknown"], StockLevels(0, 0))


class TestStockStatus(unittest.TestCase):

    def setUp(self):
        # weekly need = 1 * 2 * 7 = 14
        self.med = Medication(id="m1", name="Aspirin", per_dose=1, times=["Mattina", "Sera"], threshold=10)

    def test_weekly_need(self):
        self.assertEqual(self.med.weekly_need, 14)

    def test_status_levels(self):
        cases = [
            (StockLevels(5, 0), StockStatus.BELOW_THRESHOLD, "red"),
            (StockLevels(2, 10), StockStatus.UNDER_ONE_WEEK, "amber"),
            (StockLevels(12, 8), StockStatus.OK, "green"),
        ]
        for levels, status, tone in cases:
            result = stock_status(self.med, levels)
            self.assertEqual(result, status)
            self.assertEqual(result.tone, tone)

    def test_snapshots(self):
        items = compute_stock_snapshots([self.med], {"m1": StockLevels(3, 9)})
        self.assertEqual(items[0]["total"], 12)
        self.assertEqual(items[0]["status"], "coverage under one week")
        self.assertEqual(items[0]["tone"], "amber")


if __name__ == '__main__':
    unittest.main()
