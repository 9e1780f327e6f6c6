from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Callable, Iterable, Sequence, TypeVar

import requests
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.lib.fonts import addMapping

from ..constants import (
    BOLD_FONT_URLS,
    FALLBACK_FONT_BOLD,
    FALLBACK_FONT_REGULAR,
    FONT_BOLD,
    FONT_FAMILY,
    FONT_REGULAR,
    REGULAR_FONT_URLS,
)

logger = logging.getLogger("certportal.fonts")

T = TypeVar("T")


@dataclass
class FontBundle:
    regular: bytes | None = None
    bold: bytes | None = None
    loaded: bool = False

    @property
    def regular_name(self) -> str:
        return FONT_REGULAR if self.loaded else FALLBACK_FONT_REGULAR

    @property
    def bold_name(self) -> str:
        return FONT_BOLD if self.loaded else FALLBACK_FONT_BOLD


def first_success(operations: Iterable[Callable[[], T]]) -> T:
    """Run ``operations`` in order and return the first result that does not raise.

    The last error is re-raised when every operation fails.
    """

    last_error: Exception | None = None
    for operation in operations:
        try:
            return operation()
        except Exception as exc:
            last_error = exc
    if last_error is None:
        raise LookupError("no operations to try")
    raise last_error


def _fetch_font(session: requests.Session, url: str) -> bytes:
    try:
        response = session.get(url)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("[CERT-FONT] mirror failed url=%s error=%s", url, exc)
        raise
    return response.content


def fetch_first_available(
    urls: Sequence[str], session: requests.Session | None = None
) -> bytes:
    http = session or requests.Session()
    return first_success(
        (lambda url=url: _fetch_font(http, url)) for url in urls
    )


def provision_fonts(
    session: requests.Session | None = None,
    regular_urls: Sequence[str] = REGULAR_FONT_URLS,
    bold_urls: Sequence[str] = BOLD_FONT_URLS,
) -> FontBundle:
    """Download a fresh Roboto regular/bold pair and register it with reportlab.

    Never raises: any failure returns a bundle with ``loaded = False`` so the
    caller can switch to transliterated text with a built-in typeface.
    """

    bundle = FontBundle()
    try:
        bundle.regular = fetch_first_available(regular_urls, session)
        bundle.bold = fetch_first_available(bold_urls, session)
    except Exception as exc:
        logger.error(
            "[CERT-FONT] font download failed; Turkish characters will be "
            "transliterated error=%s",
            exc,
        )
        return bundle
    bundle.loaded = register_fonts(bundle)
    return bundle


def register_fonts(bundle: FontBundle) -> bool:
    if not bundle.regular or not bundle.bold:
        return False
    try:
        pdfmetrics.registerFont(TTFont(FONT_REGULAR, BytesIO(bundle.regular)))
        pdfmetrics.registerFont(TTFont(FONT_BOLD, BytesIO(bundle.bold)))
    except Exception as exc:
        logger.error("[CERT-FONT] font registration failed error=%s", exc)
        return False
    addMapping(FONT_FAMILY, 0, 0, FONT_REGULAR)
    addMapping(FONT_FAMILY, 1, 0, FONT_BOLD)
    logger.info(
        "[CERT-FONT] registered family=%s regular_bytes=%s bold_bytes=%s",
        FONT_FAMILY,
        len(bundle.regular),
        len(bundle.bold),
    )
    return True
