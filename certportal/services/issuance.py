from __future__ import annotations

import logging
from datetime import date

import requests

from ..constants import GEMINI_API_BASE, GEMINI_MODEL, ISSUANCE_CAP
from ..shared.certificates import (
    CertificateRequest,
    RenderedCertificate,
    render_certificate,
)
from ..shared.fonts import FontBundle
from ..shared.issuance import ensure_can_issue, record_issue
from ..shared.time import fmt_issue_date
from .messages import compose_impact_message

logger = logging.getLogger("certportal.issuance")


def issue_certificate(
    name: str,
    client_key: str,
    *,
    cap: int = ISSUANCE_CAP,
    api_key: str | None = None,
    model: str = GEMINI_MODEL,
    api_base: str = GEMINI_API_BASE,
    issue_date: date | None = None,
    impact_message: str | None = None,
    session: requests.Session | None = None,
    fonts: FontBundle | None = None,
) -> RenderedCertificate:
    """Check the cap, compose the message, render, then count the issuance.

    Raises ``ValueError`` for a blank name, ``IssuanceLimitReached`` when the
    client key is capped and ``CertificateDeliveryError`` when the PDF cannot
    be produced. The counter only moves after a successful render.
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("participant name is required")

    ensure_can_issue(client_key, cap)

    if impact_message is None:
        impact_message = compose_impact_message(
            cleaned,
            api_key=api_key,
            model=model,
            api_base=api_base,
            session=session,
        )
    request = CertificateRequest(
        name=cleaned,
        date=fmt_issue_date(issue_date),
        impact_message=impact_message,
    )
    certificate = render_certificate(request, session=session, fonts=fonts)
    record_issue(client_key)
    logger.info(
        "[CERT-ISSUED] key=%s file=%s fonts_loaded=%s",
        client_key,
        certificate.filename,
        certificate.fonts_loaded,
    )
    return certificate
