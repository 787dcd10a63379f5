import unittest
from datetime import date
from pillbox.domain.IntakeLog import IntakeKey
from pillbox.domain.Medication import Medication
from pillbox.domain.Plan import PlannerState
from pillbox.infra.pdf_utils import generate_pdf_for_export
from pillbox.logic.reporting.export import build_export, render_html, render_text
from pillbox.utilities.constants import TimeSlot

TODAY = date(2026, 10, 16)


class TestExport(unittest.TestCase):

    def setUp(self):
        self.meds = [
            Medication(id="a", name="Aspirin", dosage="100mg", per_dose=1, times=["Mattina", "Sera"]),
            Medication(id="b", name="Bisoprolol", per_dose=2, times=["Mattina"]),
        ]
        self.intakes = {IntakeKey(TODAY, TimeSlot.MORNING, "a"): True}

    def test_week_document(self):
        doc = build_export(PlannerState(today=TODAY), self.meds, self.intakes)
        self.assertEqual(doc.title, "Intake 2026-10-12 → 2026-10-18")
        self.assertEqual(len(doc.sections), 7)
        self.assertEqual(len(doc.rows), 21)
        friday = doc.sections[4]
        self.assertEqual(friday.day, TODAY)
        self.assertEqual([r.medication for r in friday.rows], ["Aspirin – 100mg", "Bisoprolol", "Aspirin – 100mg"])
        self.assertEqual([r.taken for r in friday.rows], [True, False, False])
        self.assertEqual(friday.rows[1].cells[0], "")
        self.assertEqual(friday.rows[1].dose, 2)

    def test_today_only_document(self):
        state = PlannerState(week_start=date(2026, 1, 5), today_only=True, today=TODAY)
        doc = build_export(state, self.meds, self.intakes)
        self.assertEqual(doc.title, "Intake on 2026-10-16")
        self.assertEqual([s.day for s in doc.sections], [TODAY])
        self.assertEqual(doc.to_dict()["rows"][0]["taken"], True)

    def test_renderers(self):
        doc = build_export(PlannerState(today_only=True, today=TODAY), self.meds, self.intakes)
        text = render_text(doc)
        self.assertIn("[2026-10-16]", text)
        self.assertIn("Bisoprolol", text)
        html = render_html(doc)
        self.assertIn("<h1>Intake on 2026-10-16</h1>", html)
        self.assertIn("window.print()", html)
        self.assertNotIn("window.print()", render_html(doc, auto_print=False))
        pdf = generate_pdf_for_export(doc)
        self.assertTrue(pdf.startswith(b"%PDF"))

    def test_html_escapes_names(self):
        meds = [Medication(id="x", name="<b>Bad</b>", times=["Sera"])]
        html = render_html(build_export(PlannerState(today_only=True, today=TODAY), meds, {}))
        self.assertIn("&lt;b&gt;Bad&lt;/b&gt;", html)


if __name__ == '__main__':
    unittest.main()
