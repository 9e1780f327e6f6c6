from __future__ import annotations

import io

from flask import (
    Blueprint,
    abort,
    current_app,
    jsonify,
    render_template,
    request,
    send_file,
    session as flask_session,
)

from ..app import db
from ..constants import (
    MESSAGE_DELIVERY_FAILED,
    MESSAGE_LIMIT_REACHED,
    MESSAGE_NAME_REQUIRED,
)
from ..services.issuance import issue_certificate
from ..shared.certificates import CertificateDeliveryError
from ..shared.issuance import (
    IssuanceLimitReached,
    client_storage_key,
    current_count,
    get_stat,
    is_blocked,
    remaining_issues,
)
from ..shared.portal_state import PortalState

bp = Blueprint("portal", __name__)


def _client_key() -> str:
    return client_storage_key(request.remote_addr)


def _render_form(state: PortalState, status: int = 200, name: str = ""):
    cap = current_app.config["ISSUANCE_CAP"]
    return (
        render_template(
            "index.html",
            state=state,
            name=name,
            limit_message=MESSAGE_LIMIT_REACHED.format(cap=cap),
        ),
        status,
    )


@bp.get("/")
def index():
    cap = current_app.config["ISSUANCE_CAP"]
    state = PortalState.initial(current_count(_client_key()), cap)
    return _render_form(state)


@bp.post("/certificate")
def create_certificate():
    if request.form.get("csrf_token") != flask_session.get("_csrf_token"):
        abort(400)
    cap = current_app.config["ISSUANCE_CAP"]
    key = _client_key()
    name = (request.form.get("name") or "").strip()
    state = PortalState.initial(current_count(key), cap)
    if state.limit_reached:
        current_app.logger.info("[CERT-BLOCKED] key=%s", key)
        return _render_form(state, 429)
    state = state.submit()
    if not name:
        return _render_form(state.fail(MESSAGE_NAME_REQUIRED), 400)

    try:
        certificate = issue_certificate(
            name,
            key,
            cap=cap,
            api_key=current_app.config["GEMINI_API_KEY"],
            model=current_app.config["GEMINI_MODEL"],
            api_base=current_app.config["GEMINI_API_BASE"],
        )
    except IssuanceLimitReached:
        return _render_form(state.block(), 429)
    except CertificateDeliveryError:
        current_app.logger.exception("[CERT-FAIL] key=%s", key)
        return _render_form(state.fail(MESSAGE_DELIVERY_FAILED), 500, name=name)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("[CERT-ERROR] key=%s", key)
        return _render_form(state.fail(MESSAGE_DELIVERY_FAILED), 500, name=name)

    current_app.logger.info(
        "[CERT] key=%s file=%s remaining=%s",
        key,
        certificate.filename,
        state.succeed().remaining,
    )
    return send_file(
        io.BytesIO(certificate.pdf),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=certificate.filename,
    )


@bp.get("/api/stats")
def stats():
    cap = current_app.config["ISSUANCE_CAP"]
    key = _client_key()
    stat = get_stat(key)
    payload = stat.to_json() if stat else {"count": 0, "lastGenerated": None}
    count = payload["count"]
    payload.update(
        {
            "key": key,
            "remaining": remaining_issues(count, cap),
            "blocked": is_blocked(count, cap),
        }
    )
    return jsonify(payload)
