"""
Export collaborator: render finished story pages into standalone documents.

- HTML: one self-contained file, images inlined as data URIs
- PDF: one PDF page per story page, illustration on top and text below;
  text that overflows continues on extra sheets
"""

import html
import logging
from io import BytesIO
from typing import Sequence

from PIL import Image as PILImage
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from reportlab.platypus import Frame, Paragraph

from backend.core.errors import ExportError
from backend.core.types import Image, Page

from ..config import EXPORT_TITLE

logger = logging.getLogger(__name__)

PDF_MARGIN = 15 * mm
PDF_MAX_IMAGE_HEIGHT = 150 * mm

TITLE_STYLE = ParagraphStyle("StoryTitle", fontName="Helvetica-Bold", fontSize=20, leading=24, alignment=TA_CENTER)
BODY_STYLE = ParagraphStyle("StoryBody", fontName="Times-Roman", fontSize=13, leading=18, alignment=TA_JUSTIFY)

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    body {{ font-family: 'Lora', Georgia, serif; background-color: #fdf6e3; color: #333; margin: 0; padding: 20px; }}
    .container {{ max-width: 800px; margin: auto; }}
    h1 {{ text-align: center; color: #8b4513; border-bottom: 2px solid #d2b48c; padding-bottom: 10px; }}
    .page {{ margin-bottom: 40px; text-align: center; }}
    img {{ max-width: 100%; height: auto; border-radius: 10px; border: 5px solid #d2b48c; box-shadow: 0 4px 8px rgba(0,0,0,0.1); }}
    p {{ margin-top: 15px; font-size: 1.1em; line-height: 1.6; text-align: justify; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>{title}</h1>
{pages}
  </div>
</body>
</html>
"""

HTML_PAGE_TEMPLATE = """    <div class="page">
      <img src="{src}" alt="Story Page {number}" />
      <p>{text}</p>
    </div>"""


def _check_pages(pages: Sequence[Page]) -> None:
    if not pages:
        raise ExportError("There are no pages to export")


def render_html(pages: Sequence[Page], title: str = EXPORT_TITLE) -> str:
    """Render pages as a standalone HTML document."""
    _check_pages(pages)
    rendered = "\n".join(
        HTML_PAGE_TEMPLATE.format(
            src=page.image.to_data_uri(),
            number=number,
            text=html.escape(page.text).replace("\n", "<br>"),
        )
        for number, page in enumerate(pages, start=1)
    )
    return HTML_TEMPLATE.format(title=html.escape(title), pages=rendered)


def render_pdf(pages: Sequence[Page], title: str = EXPORT_TITLE) -> bytes:
    """Render pages as a PDF, one story page per sheet."""
    _check_pages(pages)

    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(title)
    page_width, page_height = A4
    content_width = page_width - 2 * PDF_MARGIN

    for number, page in enumerate(pages, start=1):
        top = page_height - PDF_MARGIN
        if number == 1:
            title_frame = Frame(PDF_MARGIN, top - 12 * mm, content_width, 12 * mm, showBoundary=0)
            title_frame.addFromList([Paragraph(html.escape(title), TITLE_STYLE)], pdf)
            top -= 14 * mm

        image_bottom = _draw_image(pdf, page.image, top, page_width, content_width, number)

        text_top = image_bottom - 8 * mm
        text_frame = Frame(PDF_MARGIN, PDF_MARGIN, content_width, text_top - PDF_MARGIN, showBoundary=0)
        body = html.escape(page.text).replace("\n", "<br/>")
        flowables = [Paragraph(body, BODY_STYLE)]
        _fill_frame(text_frame, flowables, pdf)
        pdf.showPage()

        while flowables:
            logger.debug(f"Text of page {number} continues on another sheet")
            overflow_frame = Frame(PDF_MARGIN, PDF_MARGIN, content_width, page_height - 2 * PDF_MARGIN, showBoundary=0)
            if not _fill_frame(overflow_frame, flowables, pdf):
                raise ExportError(f"Text of page {number} does not fit on a blank sheet")
            pdf.showPage()

    pdf.save()
    return buffer.getvalue()


def _fill_frame(frame: Frame, flowables: list, pdf: canvas.Canvas) -> bool:
    """Draw flowables into ``frame``, splitting the one that straddles its bottom.

    Whatever did not fit is left in ``flowables``. Returns whether anything was drawn.
    """
    drawn = False
    while flowables:
        if frame.add(flowables[0], pdf, trySplit=1):
            del flowables[0]
            drawn = True
            continue
        pieces = frame.split(flowables[0], pdf)
        if len(pieces) < 2:
            break
        flowables[0:1] = pieces
    return drawn


def _draw_image(pdf: canvas.Canvas, image: Image, top: float, page_width: float, max_width: float, number: int) -> float:
    """Draw the illustration centred below ``top``; returns its bottom edge."""
    try:
        pil_image = PILImage.open(BytesIO(image.data))
        pil_image.load()
    except (OSError, ValueError) as e:
        logger.warning(f"Could not load image for page {number}: {e}")
        pdf.drawString(PDF_MARGIN, top - 12, "Error loading image for this page.")
        return top - 20

    reader = ImageReader(pil_image)
    image_width, image_height = pil_image.size
    aspect_ratio = image_width / image_height
    draw_width = max_width
    draw_height = draw_width / aspect_ratio
    if draw_height > PDF_MAX_IMAGE_HEIGHT:
        draw_height = PDF_MAX_IMAGE_HEIGHT
        draw_width = draw_height * aspect_ratio

    x = (page_width - draw_width) / 2
    y = top - draw_height
    pdf.drawImage(reader, x, y, width=draw_width, height=draw_height)
    return y
