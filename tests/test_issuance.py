from datetime import date

import pytest

from certportal.constants import DEFAULT_IMPACT_TEXT, IP_LOOKUP_URL
from certportal.services import issuance as issuance_service
from certportal.services.issuance import issue_certificate
from certportal.shared.certificates import CertificateDeliveryError
from certportal.shared.fonts import FontBundle
from certportal.shared.issuance import (
    IssuanceLimitReached,
    client_storage_key,
    current_count,
    get_stat,
    is_blocked,
    lookup_public_address,
    record_issue,
    remaining_issues,
)
from certportal.shared.transliteration import sanitize_text

KEY = "cert_stats_203.0.113.7"


def test_client_storage_key():
    assert client_storage_key("203.0.113.7") == KEY
    assert client_storage_key(None) == "cert_stats_generic"
    assert client_storage_key("  ") == "cert_stats_generic"


@pytest.mark.parametrize("count,remaining,blocked", [(0, 2, False), (1, 1, False), (2, 0, True), (3, 0, True)])
def test_remaining_and_blocked(count, remaining, blocked):
    assert remaining_issues(count) == remaining
    assert is_blocked(count) is blocked


def test_lookup_public_address(fake_http, fake_response):
    http = fake_http({IP_LOOKUP_URL: fake_response(payload={"ip": "198.51.100.4"})})
    assert lookup_public_address(IP_LOOKUP_URL, http) == "198.51.100.4"


@pytest.mark.parametrize("payload", [None, {}, {"ip": ""}, ["198.51.100.4"]])
def test_lookup_failures_return_none(fake_http, fake_response, payload):
    http = fake_http({IP_LOOKUP_URL: fake_response(payload=payload)})
    assert lookup_public_address(IP_LOOKUP_URL, http) is None


def test_lookup_without_network_returns_none():
    assert lookup_public_address(IP_LOOKUP_URL) is None


def test_record_issue_increments_and_stamps(app):
    assert current_count(KEY) == 0
    first = record_issue(KEY)
    assert first.count == 1
    assert first.last_generated is not None
    record_issue(KEY)
    stat = get_stat(KEY)
    assert stat.count == 2
    assert stat.to_json()["count"] == 2
    assert stat.to_json()["lastGenerated"]


def test_issue_certificate_counts_one_per_success(app):
    rendered = issue_certificate(
        "Ahmet Yılmaz",
        KEY,
        issue_date=date(2025, 1, 1),
        fonts=FontBundle(),
    )
    assert rendered.filename == "Ahmet_Yilmaz_GonulluKatilimSertifikasi.pdf"
    assert "Duzenlenme Tarihi: 01.01.2025" in rendered.texts
    assert current_count(KEY) == 1


def test_issue_certificate_uses_generated_message_when_not_given(app, monkeypatch):
    seen = {}

    def fake_compose(name, **kwargs):
        seen["name"] = name
        seen.update(kwargs)
        return "Katkılarınız çok değerli."

    monkeypatch.setattr(issuance_service, "compose_impact_message", fake_compose)
    rendered = issue_certificate("  Ali Veli ", KEY, api_key="secret", fonts=FontBundle())
    assert seen["name"] == "Ali Veli"
    assert seen["api_key"] == "secret"
    assert "Katkilariniz cok degerli." in rendered.texts


def test_blank_generated_message_renders_default(app, monkeypatch):
    monkeypatch.setattr(issuance_service, "compose_impact_message", lambda name, **kw: "")
    rendered = issue_certificate("Ali", KEY, fonts=FontBundle())
    assert sanitize_text(DEFAULT_IMPACT_TEXT) in " ".join(rendered.texts)


def test_delivery_error_leaves_counter_untouched(app, monkeypatch):
    def broken_render(request, session=None, fonts=None):
        raise CertificateDeliveryError("boom")

    monkeypatch.setattr(issuance_service, "render_certificate", broken_render)
    with pytest.raises(CertificateDeliveryError):
        issue_certificate("Ali", KEY, fonts=FontBundle())
    assert current_count(KEY) == 0


def test_cap_blocks_before_any_work(app, monkeypatch):
    record_issue(KEY)
    record_issue(KEY)

    def unexpected(*args, **kwargs):
        raise AssertionError("should not be called once capped")

    monkeypatch.setattr(issuance_service, "compose_impact_message", unexpected)
    monkeypatch.setattr(issuance_service, "render_certificate", unexpected)
    with pytest.raises(IssuanceLimitReached) as excinfo:
        issue_certificate("Ali", KEY, fonts=FontBundle())
    assert excinfo.value.count == 2
    assert excinfo.value.cap == 2
    assert current_count(KEY) == 2


def test_blank_name_is_rejected_without_counting(app):
    with pytest.raises(ValueError):
        issue_certificate("   ", KEY, fonts=FontBundle())
    assert current_count(KEY) == 0
