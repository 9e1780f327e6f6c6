"""Transliteration helpers for rendering without a Unicode font."""

from __future__ import annotations

import re
import unicodedata

from ..constants import FALLBACK_FILE_STEM, FILE_NAME_SUFFIX

_TURKISH_TO_ASCII = str.maketrans(
    {
        "ğ": "g",
        "Ğ": "G",
        "ü": "u",
        "Ü": "U",
        "ş": "s",
        "Ş": "S",
        "ı": "i",
        "İ": "I",
        "ö": "o",
        "Ö": "O",
        "ç": "c",
        "Ç": "C",
        "â": "a",
        "Â": "A",
        "î": "i",
        "Î": "I",
        "û": "u",
        "Û": "U",
    }
)

TURKISH_DIACRITICS = frozenset("ğĞüÜşŞıİöÖçÇâÂîÎûÛ")

# breve, dot above, diaeresis, cedilla, circumflex
_COMBINING_MARKS_RE = re.compile("[\u0302\u0306\u0307\u0308\u0327]")

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_FILE_CHARS_RE = re.compile(r"[^A-Za-z0-9_]")


def sanitize_text(text: str) -> str:
    """Replace Turkish diacritic letters with their closest ASCII letter.

    Input is NFC-normalized first so decomposed letters (``S`` + U+0327) are
    caught too; Turkish combining marks left over after that are dropped.
    Case is preserved and the function is idempotent.
    """

    composed = unicodedata.normalize("NFC", text or "").translate(_TURKISH_TO_ASCII)
    return _COMBINING_MARKS_RE.sub("", composed)


def turkish_upper(text: str) -> str:
    """Upper-case ``text`` following Turkish rules (``i`` → ``İ``, ``ı`` → ``I``)."""

    return (text or "").replace("i", "İ").replace("ı", "I").upper()


def safe_file_name(name: str) -> str:
    """Return a file-system safe stem: ``"Ahmet Yılmaz"`` → ``"Ahmet_Yilmaz"``."""

    stem = _WHITESPACE_RE.sub("_", sanitize_text(name).strip())
    stem = _UNSAFE_FILE_CHARS_RE.sub("", stem)
    return stem or FALLBACK_FILE_STEM


def certificate_filename(name: str) -> str:
    return f"{safe_file_name(name)}_{FILE_NAME_SUFFIX}.pdf"
