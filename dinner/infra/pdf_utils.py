import io
from datetime import date
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from dinner.domain.ShoppingList import ShoppingList


def generate_pdf_for_shopping_list(shopping_list: ShoppingList, *, as_of: Optional[date] = None) -> bytes:
    """Simple PDF table: [ ] / Item / Qty, pending items first."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    day = (as_of or date.today()).isoformat()
    elements = [
        Paragraph(f"Shopping List – {day}", styles["Title"]),
        Spacer(1, 16),
    ]

    data = [["", "Item", "Qty"]]
    for item in shopping_list.pending() + shopping_list.checked():
        data.append(["x" if item.checked else "", item.name, item.qty or "-"])
    if len(data) == 1:
        data.append(["", "Nothing to buy", ""])

    table = Table(data, repeatRows=1, colWidths=[30, 330, 150])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("ALIGN", (0,0), (0,-1), "CENTER"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 12),
        ("BOTTOMPADDING", (0,0), (-1,0), 10),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
