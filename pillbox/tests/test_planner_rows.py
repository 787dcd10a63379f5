import unittest
from datetime import date
from pillbox.domain.IntakeLog import IntakeKey
from pillbox.domain.Medication import Medication
from pillbox.logic.planner.week import build_rows, planned_doses
from pillbox.utilities.constants import TimeSlot


def _med(id, name, times, archived=False):
    return Medication(id=id, family_id="fam", name=name, per_dose=1, times=times, archived=archived)


class TestPlannerRows(unittest.TestCase):

    def setUp(self):
        self.meds = [
            _med("z", "Zinc", ["Sera", "Mattina"]),
            _med("a", "Aspirin", ["Mattina"]),
            _med("x", "Archived", ["Mattina"], archived=True),
            _med("m", "Metformin", ["Mezzogiorno", "Sera"]),
        ]
        self.days = [date(2026, 10, 12), date(2026, 10, 13)]

    def test_planned_doses_slot_then_name_order(self):
        doses = [(m.name, s) for m, s in planned_doses(self.meds)]
        self.assertEqual(doses, [
            ("Aspirin", TimeSlot.MORNING),
            ("Zinc", TimeSlot.MORNING),
            ("Metformin", TimeSlot.MIDDAY),
            ("Metformin", TimeSlot.EVENING),
            ("Zinc", TimeSlot.EVENING),
        ])

    def test_rows_per_day_and_label_flags(self):
        rows = build_rows(self.days, self.meds, {})
        self.assertEqual(len(rows), 10)
        first_day = rows[:5]
        self.assertEqual([r.first_of_day for r in first_day], [True, False, False, False, False])
        self.assertEqual([r.first_of_slot for r in first_day], [True, False, True, True, False])
        self.assertTrue(rows[5].first_of_day)
        self.assertEqual(rows[5].day, self.days[1])

    def test_archived_medications_are_excluded(self):
        rows = build_rows(self.days, self.meds, {})
        self.assertNotIn("x", {r.medication.id for r in rows})

    def test_taken_state_joined_from_intakes(self):
        intakes = {IntakeKey(self.days[1], TimeSlot.EVENING, "z"): True}
        rows = build_rows(self.days, self.meds, intakes)
        taken = [(r.day, r.slot, r.medication.id) for r in rows if r.taken]
        self.assertEqual(taken, [(self.days[1], TimeSlot.EVENING, "z")])
        self.assertTrue(rows[-1].to_dict()["taken"])


if __name__ == '__main__':
    unittest.main()
