import os
import pathlib
import sys

import pytest
import requests

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from certportal.app import create_app, db


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "slow" in item.keywords or "quarantine" in item.keywords:
            continue
        item.add_marker("full")
        if "no_smoke" in item.keywords:
            continue
        item.add_marker("smoke")


class FakeResponse:
    def __init__(self, status_code=200, content=b"", payload=None):
        self.status_code = status_code
        self.content = content
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    """Stand-in for ``requests.Session`` answering from a url → response map."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def _answer(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        answer = self.routes.get(url)
        if isinstance(answer, Exception):
            raise answer
        if answer is None:
            raise requests.ConnectionError(f"no route for {url}")
        return answer

    def get(self, url, **kwargs):
        return self._answer("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._answer("POST", url, **kwargs)


@pytest.fixture(autouse=True)
def no_network(monkeypatch):
    def refuse(self, method, url, *args, **kwargs):
        raise requests.ConnectionError(f"network disabled in tests: {method} {url}")

    monkeypatch.setattr(requests.Session, "request", refuse)


@pytest.fixture
def fake_http():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def vera_fonts():
    import reportlab

    font_dir = os.path.join(os.path.dirname(reportlab.__file__), "fonts")
    with open(os.path.join(font_dir, "Vera.ttf"), "rb") as handle:
        regular = handle.read()
    with open(os.path.join(font_dir, "VeraBd.ttf"), "rb") as handle:
        bold = handle.read()
    return regular, bold


@pytest.fixture
def app(monkeypatch):
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("ISSUANCE_CAP", raising=False)
    application = create_app()
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()
