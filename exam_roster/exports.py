from pathlib import Path

import pandas as pd
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

COLUMNS = ["UniqueID", "RollNumbers", "QuestionPaperCount", "Subject"]


def records_to_frame(records):
    return pd.DataFrame([r.to_row() for r in records], columns = COLUMNS)


def _target(export_dir, name, suffix):
    export_dir = Path(export_dir)
    export_dir.mkdir(parents = True, exist_ok = True)
    return export_dir / f"{name}{suffix}"


def export_csv(records, export_dir, name):
    file_path = _target(export_dir, name, ".csv")
    records_to_frame(records).to_csv(file_path, index = False)
    return file_path


def export_excel(records, export_dir, name):
    file_path = _target(export_dir, name, ".xlsx")
    records_to_frame(records).to_excel(file_path, index = False)
    return file_path


def _wrap(text, width):
    lines = []
    while len(text) > width:
        cut = text.rfind(",", 0, width)
        cut = width if cut <= 0 else cut + 1
        lines.append(text[:cut].strip())
        text = text[cut:].strip()
    lines.append(text)
    return lines


def export_pdf(records, export_dir, name, title):
    file_path = _target(export_dir, name, ".pdf")

    c = canvas.Canvas(str(file_path), pagesize=A4)
    width, height = A4

    def header(y):
        c.setFont("Helvetica-Bold", 14)
        c.drawString(50, y, title)
        y -= 30
        c.setFont("Helvetica", 10)
        c.drawString(50, y, "Room")
        c.drawString(130, y, "Roll Numbers")
        c.drawString(480, y, "Count")
        y -= 15
        c.line(50, y, 550, y)
        return y - 15

    y = header(height - 50)

    for record in records:
        lines = _wrap(", ".join(record.occupants), 60) if record.occupants else ["-"]
        if y - 15 * len(lines) < 60:
            c.showPage()
            y = header(height - 50)

        c.drawString(50, y, record.room_id[:12])
        c.drawString(480, y, str(record.occupant_count))
        for line in lines:
            c.drawString(130, y, line)
            y -= 15
        y -= 5

    c.save()
    return file_path
