from typing import List, Dict
from pathlib import Path
import logging
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import cm

logger = logging.getLogger(__name__)


def export_summary_pdf(output_path: str, title: str, summary: Dict, image_paths: List[str] | None = None):
    p = canvas.Canvas(output_path, pagesize=A4)
    width, height = A4
    p.setFont("Helvetica-Bold", 16)
    p.drawString(2*cm, height-2*cm, title)
    p.setFont("Helvetica", 11)
    y = height - 3*cm
    for label in ('model', 'avg_total', 'success_rate'):
        if summary.get(label) is not None:
            p.drawString(2*cm, y, f"{label}: {summary[label]}")
            y -= 0.8*cm
    items = summary.get('items') or []
    p.drawString(2*cm, y, f"Maps: {len(items)}")
    y -= 0.8*cm
    for i, it in enumerate(items):
        s = it.get('scores', {})
        line = f"[{i}] {it.get('map', '')} outcome={it.get('outcome')} total={s.get('total')} S={s.get('S')} Q={s.get('Q')} E={s.get('E')}"
        if it.get('error'):
            line += f" error={it['error']}"
        p.drawString(2*cm, y, line[:110])
        y -= 0.6*cm
        if y < 4*cm:
            p.showPage()
            p.setFont("Helvetica", 11)
            y = height - 3*cm
    # first map image on its own page
    for img in (image_paths or [])[:1]:
        if img and Path(img).exists():
            p.showPage()
            p.drawString(2*cm, height-2*cm, "Sample map")
            p.drawImage(img, 2*cm, 4*cm, width=16*cm, height=20*cm, preserveAspectRatio=True, mask='auto')
        else:
            logger.warning(f"Skipping missing image {img}")
    p.save()
    return output_path
