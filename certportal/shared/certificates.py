from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO

import requests
from PyPDF2 import PdfReader, PdfWriter
from reportlab.lib.colors import HexColor, white
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..constants import (
    CERTIFICATE_NO_LABEL,
    CERTIFICATE_TITLE,
    CLOSING_TEXT,
    DEFAULT_COORDINATOR_TITLE,
    DEFAULT_IMPACT_TEXT,
    DEFAULT_INSTITUTION,
    DEFAULT_UNIT,
    INTRO_TEXT,
    ISSUE_DATE_LABEL,
)
from .decorations import draw_atom, draw_dna_helix, draw_emblem
from .fonts import FontBundle, provision_fonts
from .transliteration import certificate_filename, sanitize_text, turkish_upper

logger = logging.getLogger("certportal.certificates")

_MM = 72 / 25.4

PAGE_SIZE = landscape(A4)

NAME_MAX_PT = 40
NAME_MIN_PT = 20
NAME_STEP_PT = 2
NAME_SIDE_MARGIN_MM = 90
IMPACT_SIDE_MARGIN_MM = 100
IMPACT_LINE_HEIGHT_MM = 7.2
CLOSING_PADDING_MM = 8

INK = HexColor("#0f172a")
TEXT_DARK = HexColor("#334155")
TEXT_MUTED = HexColor("#64748b")
TEXT_SOFT = HexColor("#475569")
RULE = HexColor("#cbd5e1")
FRAME_OUTER = HexColor("#083344")
FRAME_INNER = HexColor("#164e63")


def _mm(v: float) -> float:
    return v * _MM


class CertificateDeliveryError(RuntimeError):
    """Raised when the rendered certificate cannot be serialized."""


@dataclass
class CertificateRequest:
    name: str
    date: str
    impact_message: str = ""
    institution: str | None = None
    department_or_unit: str | None = None
    coordinator_title: str | None = None
    coordinator_name: str | None = None
    location: str | None = None
    certificate_no: str | None = None

    def __post_init__(self) -> None:
        if not (self.name or "").strip():
            raise ValueError("participant name is required")


@dataclass
class RenderedCertificate:
    filename: str
    pdf: bytes
    fonts_loaded: bool
    name_font_size: int
    texts: list[str] = field(default_factory=list)


def fit_font_size(
    text: str,
    font_name: str,
    max_width: float,
    max_pt: int = NAME_MAX_PT,
    min_pt: int = NAME_MIN_PT,
    step: int = NAME_STEP_PT,
) -> int:
    """Shrink from ``max_pt`` in ``step`` decrements until ``text`` fits or ``min_pt`` is hit."""
    pt = max_pt
    while stringWidth(text, font_name, pt) > max_width and pt > min_pt:
        pt -= step
    return pt


def resolve_impact_text(impact_message: str | None) -> str:
    impact = (impact_message or "").strip()
    return impact or DEFAULT_IMPACT_TEXT


def render_certificate(
    data: CertificateRequest,
    session: requests.Session | None = None,
    fonts: FontBundle | None = None,
) -> RenderedCertificate:
    """Lay out the certificate and return it serialized as a one-page PDF.

    Fonts are provisioned first because the result decides whether every
    string is drawn as-is or transliterated to ASCII with a built-in typeface.
    """
    bundle = fonts if fonts is not None else provision_fonts(session)
    loaded = bundle.loaded
    texts: list[str] = []

    def t(text: str) -> str:
        return text if loaded else sanitize_text(text)

    def font(bold: bool = False) -> str:
        return bundle.bold_name if bold else bundle.regular_name

    w, h = PAGE_SIZE
    center_x = w / 2.0
    page_w_mm = w / _MM

    def top(y_mm: float) -> float:
        return h - _mm(y_mm)

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=PAGE_SIZE)

    def centred(text: str, y: float) -> None:
        texts.append(text)
        c.drawCentredString(center_x, y, text)

    def centred_block(lines: list[str], y_mm: float, size: float, factor: float) -> None:
        for index, line in enumerate(lines):
            texts.append(line)
            c.drawCentredString(center_x, top(y_mm) - index * size * factor, line)

    institution = data.institution if data.institution is not None else DEFAULT_INSTITUTION
    unit = (
        data.department_or_unit
        if data.department_or_unit is not None
        else DEFAULT_UNIT
    )
    coordinator_title = (
        data.coordinator_title
        if data.coordinator_title is not None
        else DEFAULT_COORDINATOR_TITLE
    )
    coordinator_name = data.coordinator_name or ""
    location = data.location or ""
    certificate_no = data.certificate_no or ""

    # Background and frame
    c.setFillColor(white)
    c.rect(0, 0, w, h, stroke=0, fill=1)
    c.setStrokeColor(FRAME_OUTER)
    c.setLineWidth(_mm(2.5))
    c.rect(_mm(8), _mm(8), w - _mm(16), h - _mm(16), stroke=1, fill=0)
    c.setStrokeColor(FRAME_INNER)
    c.setLineWidth(_mm(0.8))
    c.rect(_mm(12), _mm(12), w - _mm(24), h - _mm(24), stroke=1, fill=0)

    # Decorations
    draw_dna_helix(c, _mm(20), top(35), 120, 0.9)
    draw_dna_helix(c, w - _mm(35), top(35), 120, 0.9)
    for ax, ay in (
        (_mm(22), top(22)),
        (w - _mm(22), top(22)),
        (_mm(22), _mm(22)),
        (w - _mm(22), _mm(22)),
    ):
        draw_atom(c, ax, ay, 1.3)
    draw_emblem(c, center_x, top(36), _mm(12))

    # Institution lines
    c.setFillColor(TEXT_DARK)
    c.setFont(font(), 12)
    centred(t(institution), top(55))
    c.setFillColor(TEXT_MUTED)
    c.setFont(font(), 10.5)
    centred(t(unit), top(61))

    # Title
    c.setFillColor(FRAME_INNER)
    c.setFont(font(bold=True), 32)
    centred(t(CERTIFICATE_TITLE), top(78))

    # Intro
    c.setFillColor(TEXT_DARK)
    c.setFont(font(), 14)
    content_width = _mm(page_w_mm - NAME_SIDE_MARGIN_MM)
    intro_lines = simpleSplit(t(INTRO_TEXT), font(), 14, content_width)
    centred_block(intro_lines, 92, 14, 1.45)

    # Name, shrunk to fit
    display_name = t(turkish_upper(data.name.strip()))
    name_pt = fit_font_size(display_name, font(bold=True), content_width)
    c.setFillColor(INK)
    c.setFont(font(bold=True), name_pt)
    name_y_mm = 122
    centred(display_name, top(name_y_mm))

    c.setStrokeColor(RULE)
    c.setLineWidth(_mm(0.5))
    c.line(
        center_x - _mm(55),
        top(name_y_mm + 8),
        center_x + _mm(55),
        top(name_y_mm + 8),
    )

    # Impact message
    impact_text = t(resolve_impact_text(data.impact_message))
    c.setFillColor(TEXT_SOFT)
    c.setFont(font(), 12.5)
    impact_lines = simpleSplit(
        impact_text, font(), 12.5, _mm(page_w_mm - IMPACT_SIDE_MARGIN_MM)
    )
    impact_y_mm = 142
    centred_block(impact_lines, impact_y_mm, 12.5, 1.5)

    # Closing line sits below however many lines the impact message took
    c.setFillColor(TEXT_DARK)
    closing_y_mm = (
        impact_y_mm + len(impact_lines) * IMPACT_LINE_HEIGHT_MM + CLOSING_PADDING_MM
    )
    closing_lines = simpleSplit(t(CLOSING_TEXT), font(), 12.5, content_width)
    centred_block(closing_lines, closing_y_mm, 12.5, 1.35)

    # Footer, left block
    footer_y_mm = h / _MM - 28
    left_x = _mm(30)
    c.setFillColor(TEXT_MUTED)
    c.setFont(font(), 10.5)
    location_part = f"{t(location)}, " if location else ""
    date_line = f"{location_part}{t(ISSUE_DATE_LABEL)}: {t(data.date)}"
    texts.append(date_line)
    c.drawString(left_x, top(footer_y_mm), date_line)
    if certificate_no:
        c.setFont(font(), 9.5)
        number_line = f"{t(CERTIFICATE_NO_LABEL)}: {t(certificate_no)}"
        texts.append(number_line)
        c.drawString(left_x, top(footer_y_mm + 6), number_line)

    # Footer, signature block
    sig_x = w - _mm(78)
    sig_center = sig_x + _mm(24)
    c.setStrokeColor(INK)
    c.setLineWidth(_mm(0.5))
    c.line(sig_x, top(footer_y_mm - 6), sig_x + _mm(48), top(footer_y_mm - 6))
    c.setFillColor(INK)
    c.setFont(font(bold=True), 10.5)
    texts.append(t(coordinator_title))
    c.drawCentredString(sig_center, top(footer_y_mm), t(coordinator_title))
    if coordinator_name.strip():
        c.setFillColor(TEXT_DARK)
        c.setFont(font(), 9.5)
        texts.append(t(coordinator_name))
        c.drawCentredString(sig_center, top(footer_y_mm + 5.5), t(coordinator_name))

    filename = certificate_filename(data.name)
    pdf_bytes = _serialize(
        c,
        buffer,
        title=t(f"{CERTIFICATE_TITLE} - {data.name.strip()}"),
        author=t(institution),
    )
    logger.info(
        "[CERT] file=%s fonts=%s name_pt=%s bytes=%s",
        filename,
        "native" if loaded else "transliterated",
        name_pt,
        len(pdf_bytes),
    )
    return RenderedCertificate(
        filename=filename,
        pdf=pdf_bytes,
        fonts_loaded=loaded,
        name_font_size=name_pt,
        texts=texts,
    )


def _serialize(c: canvas.Canvas, buffer: BytesIO, *, title: str, author: str) -> bytes:
    try:
        c.save()
        buffer.seek(0)
        reader = PdfReader(buffer)
        writer = PdfWriter()
        for page in reader.pages:
            writer.add_page(page)
        writer.add_metadata({"/Title": title, "/Author": author})
        out_buf = BytesIO()
        writer.write(out_buf)
    except Exception as exc:
        logger.exception("[CERT-FAIL] serialization failed")
        raise CertificateDeliveryError("certificate could not be serialized") from exc
    return out_buf.getvalue()

