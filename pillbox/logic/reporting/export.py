"""Printable export of the planner.

``build_export`` is pure: it turns the visible planner rows into an
``ExportDocument`` that any renderer can consume. Renderers for plain text
and print-ready HTML live here; the PDF renderer is in
``pillbox.infra.pdf_utils``.
"""
from __future__ import annotations
from datetime import date
from typing import Dict, Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from pillbox.domain.IntakeLog import IntakeKey
from pillbox.domain.Medication import Medication
from pillbox.domain.Plan import PlannerState
from pillbox.logic.planner.week import build_rows
from pillbox.utilities.config import TEMPLATES_DIR

__all__ = ["ExportRow", "ExportSection", "ExportDocument", "build_export", "render_text", "render_html"]

COLUMNS = ("Time", "Medication", "Dose", "Taken")
TAKEN_MARK = "✓"


class ExportRow:
    def __init__(self, day: date, slot_label: str, medication: str, dose: int, taken: bool,
                 show_slot: bool = True):
        self.day = day
        self.slot_label = slot_label
        self.medication = medication
        self.dose = dose
        self.taken = taken
        self.show_slot = show_slot

    @property
    def cells(self) -> List[str]:
        return [self.slot_label if self.show_slot else "", self.medication, str(self.dose),
                TAKEN_MARK if self.taken else ""]

    def to_dict(self):
        return {"day": self.day.isoformat(), "slot": self.slot_label, "medication": self.medication,
                "dose": self.dose, "taken": self.taken}


class ExportSection:
    def __init__(self, day: date, rows: Optional[List[ExportRow]] = None):
        self.day = day
        self.rows = rows or []

    @property
    def heading(self) -> str:
        return self.day.isoformat()


class ExportDocument:
    def __init__(self, title: str, generated_on: date, sections: List[ExportSection]):
        self.title = title
        self.generated_on = generated_on
        self.sections = sections
        self.columns = COLUMNS

    @property
    def rows(self) -> List[ExportRow]:
        return [row for section in self.sections for row in section.rows]

    def to_dict(self):
        return {
            "title": self.title,
            "generated_on": self.generated_on.isoformat(),
            "columns": list(self.columns),
            "rows": [row.to_dict() for row in self.rows],
        }


def export_title(state: PlannerState) -> str:
    if state.today_only:
        return f"Intake on {state.days()[0].isoformat()}"
    return f"Intake {state.week_start.isoformat()} → {state.week_end.isoformat()}"


def build_export(state: PlannerState, medications: Iterable[Medication],
                 intakes: Dict[IntakeKey, bool]) -> ExportDocument:
    days = state.days()
    sections = {day: ExportSection(day) for day in days}
    for row in build_rows(days, medications, intakes):
        sections[row.day].rows.append(ExportRow(
            row.day, row.slot.label, row.medication.label, row.medication.per_dose,
            row.taken, show_slot=row.first_of_slot,
        ))
    return ExportDocument(export_title(state), state.today, [sections[d] for d in days])


def render_text(doc: ExportDocument) -> str:
    widths = [max(len(COLUMNS[i]), *(len(r.cells[i]) for r in doc.rows)) if doc.rows else len(COLUMNS[i])
              for i in range(len(COLUMNS))]

    def line(cells):
        return "  ".join(c.ljust(w) for c, w in zip(cells, widths)).rstrip()

    out = [doc.title, "", line(COLUMNS), line("-" * w for w in widths)]
    for section in doc.sections:
        out.append(f"[{section.heading}]")
        out.extend(line(row.cells) for row in section.rows)
    return "\n".join(out) + "\n"


_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


def render_html(doc: ExportDocument, auto_print: bool = True) -> str:
    """Print-ready HTML; the browser opens its print dialog on load."""
    return _env.get_template("export_week.html").render(doc=doc, auto_print=auto_print)
