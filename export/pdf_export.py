"""Comparison exports: reportlab PDF and pandas CSV."""
from __future__ import annotations
import io
from xml.sax.saxutils import escape
from typing import Optional, Sequence

from reportlab.lib.pagesizes import LETTER, landscape
from reportlab.lib import colors
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet

from core.compare import allocation_table, comparison_insights, comparison_table
from core.models import ScenarioOutput
from core.presets import DISCLAIMER

GRID = TableStyle([('BACKGROUND',(0,0),(-1,0), colors.lightgrey),('BOX',(0,0),(-1,-1),1,colors.black),('INNERGRID',(0,0),(-1,-1),0.5,colors.grey)])


def build_comparison_pdf(names: Sequence[str], results: Sequence[ScenarioOutput], branding: Optional[dict] = None) -> bytes:
    """Render the scenario comparison to PDF and return the document bytes."""
    branding = branding or {}
    styles = getSampleStyleSheet()
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=landscape(LETTER), leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    story = []
    title = branding.get("title","Mortgage Scenario Comparison")
    story += [Paragraph(f"<b>{escape(title)}</b>", styles['Title']), Spacer(1,6)]
    if branding.get("mlo"): story.append(Paragraph(f"MLO: {branding['mlo']}  |  NMLS: {branding.get('nmls','')}", styles['Normal']))
    if branding.get("contact"): story.append(Paragraph(f"Contact: {branding['contact']}", styles['Normal']))
    story += [Spacer(1, 12)]

    insights = comparison_insights(names, results)
    if insights:
        rows = [["Highlight","Value","Option"]] + [[i.title, i.value, i.option] for i in insights]
        t = Table(rows, hAlign='LEFT')
        t.setStyle(GRID)
        story += [t, Spacer(1, 12)]

    df = comparison_table(names, results)
    if not df.empty:
        rows = [[df.index.name] + list(df.columns)]
        for metric, values in df.iterrows():
            rows.append([metric] + [Paragraph(escape(v), styles["BodyText"]) for v in values])
        t = Table(rows, hAlign='LEFT', repeatRows=1)
        t.setStyle(GRID)
        story += [Paragraph("<b>Side-by-side</b>", styles['Heading3']), Spacer(1,6), t, Spacer(1,12)]

    for name, r in zip(names, results):
        steps = allocation_table(r)
        if steps.empty:
            continue
        rows = [list(steps.columns)] + [
            [f"{s['Rate']:.3f}%", f"${s['Points Cost']:,.2f}", f"${s['Monthly Save']:,.2f}", str(int(s['Break-even (mo)']))]
            for _, s in steps.iterrows()
        ]
        t = Table(rows, hAlign='LEFT')
        t.setStyle(GRID)
        story += [Paragraph(f"<b>Buydown Steps: {escape(name)}</b>", styles['Heading3']), Spacer(1,6), t, Spacer(1,12)]

    story += [Spacer(1, 12), Paragraph(f"<font size=8>{DISCLAIMER}</font>", styles['Normal'])]
    doc.build(story)
    return buf.getvalue()


def build_comparison_csv(names: Sequence[str], results: Sequence[ScenarioOutput]) -> bytes:
    return comparison_table(names, results).to_csv().encode("utf-8")
