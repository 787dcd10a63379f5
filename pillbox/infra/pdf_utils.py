import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from pillbox.logic.reporting.export import ExportDocument

DAY_BACKGROUND = colors.HexColor("#f5f5f5")


def generate_pdf_for_export(doc: ExportDocument) -> bytes:
    """Render the export as a PDF table: one day header row, then Time / Medication / Dose / Taken."""
    buf = io.BytesIO()
    pdf = SimpleDocTemplate(
        buf, pagesize=A4, title=doc.title,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(doc.title.replace("→", "-"), styles["Title"]),
        Spacer(1, 16),
    ]

    data = [list(doc.columns)]
    day_rows = []
    for section in doc.sections:
        day_rows.append(len(data))
        data.append([section.heading, "", "", ""])
        for row in section.rows:
            # Helvetica has no check mark glyph
            cells = row.cells
            cells[3] = "X" if row.taken else ""
            data.append(cells)

    table = Table(data, repeatRows=1, colWidths=[80, 280, 60, 60])
    style = [
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#fafafa")),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,-1), 10),
        ("ALIGN", (2,1), (-1,-1), "CENTER"),
        ("BOTTOMPADDING", (0,0), (-1,0), 8),
        ("GRID", (0,0), (-1,-1), 0.5, colors.HexColor("#dddddd")),
    ]
    for idx in day_rows:
        style += [
            ("SPAN", (0,idx), (-1,idx)),
            ("BACKGROUND", (0,idx), (-1,idx), DAY_BACKGROUND),
            ("FONTNAME", (0,idx), (-1,idx), "Helvetica-Bold"),
            ("ALIGN", (0,idx), (-1,idx), "LEFT"),
        ]
    table.setStyle(TableStyle(style))

    elements.append(table)
    pdf.build(elements)
    return buf.getvalue()
