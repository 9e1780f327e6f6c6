import logging
import os
import secrets
import sys

from flask import Flask, session
from flask_sqlalchemy import SQLAlchemy

from .constants import GEMINI_API_BASE, GEMINI_MODEL, IP_LOOKUP_URL, ISSUANCE_CAP

db = SQLAlchemy()


def _configure_logging(level_name: str) -> None:
    logger = logging.getLogger("certportal")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))


def create_app():
    app = Flask(__name__, template_folder="templates")
    app.secret_key = os.getenv("SECRET_KEY", "dev")

    def generate_csrf_token():
        token = session.get("_csrf_token")
        if not token:
            token = secrets.token_hex(16)
            session["_csrf_token"] = token
        return token

    app.jinja_env.globals["csrf_token"] = generate_csrf_token

    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv(
        "DATABASE_URL", "sqlite:///certportal.db"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    app.config["GEMINI_API_KEY"] = os.getenv("GEMINI_API_KEY") or os.getenv(
        "API_KEY", ""
    )
    app.config["GEMINI_MODEL"] = os.getenv("GEMINI_MODEL", GEMINI_MODEL)
    app.config["GEMINI_API_BASE"] = os.getenv("GEMINI_API_BASE", GEMINI_API_BASE)
    app.config["IP_LOOKUP_URL"] = os.getenv("IP_LOOKUP_URL", IP_LOOKUP_URL)
    try:
        app.config["ISSUANCE_CAP"] = int(os.getenv("ISSUANCE_CAP", ISSUANCE_CAP))
    except ValueError:
        app.config["ISSUANCE_CAP"] = ISSUANCE_CAP

    _configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    db.init_app(app)

    from . import models  # noqa: F401  registers tables on db.metadata
    from .routes.portal import bp as portal_bp

    app.register_blueprint(portal_bp)

    @app.get("/health")
    def health():  # pragma: no cover - simple healthcheck
        return "OK", 200

    return app
