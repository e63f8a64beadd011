import io
from typing import List
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from mealcal.domain.MealPlanStore import MealPlanStore
from mealcal.domain.Week import week_window


def week_meal_types(store: MealPlanStore, anchor) -> List[str]:
    """Meal types used as table columns: defaults first, then customs and orphans in first-seen order."""
    window = week_window(anchor)
    columns: List[str] = []
    for day in window.days:
        for label in store.meal_types_for_date(day):
            if label not in columns:
                columns.append(label)
    for slot in store.slots_for_week(window.start):
        if slot.meal_type not in columns:
            columns.append(slot.meal_type)
    return columns


def generate_pdf_for_week(store: MealPlanStore, anchor) -> bytes:
    """Generate a PDF table: Day / one column per meal type for the week containing ``anchor``."""
    window = week_window(anchor)
    columns = week_meal_types(store, window.start)

    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Meal Plan - {window.label}", styles["Title"]),
        Spacer(1, 16),
    ]

    data = [["Day"] + [c.title() for c in columns]]
    for day in window.days:
        row = [day.strftime("%A (%Y-%m-%d)")]
        for meal_type in columns:
            slot = store.find_slot(day, meal_type)
            row.append(", ".join(r.name or r.id for r in slot.recipes) if slot else "-")
        data.append(row)

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("ALIGN", (0,0), (-1,-1), "CENTER"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 12),
        ("BOTTOMPADDING", (0,0), (-1,0), 10),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
