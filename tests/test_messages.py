import pytest
import requests

from certportal.constants import DEFAULT_GENERATED_MESSAGE, GEMINI_API_BASE, GEMINI_MODEL
from certportal.services.messages import (
    build_prompt,
    compose_impact_message,
    generate_impact_message,
)

URL = f"{GEMINI_API_BASE}/models/{GEMINI_MODEL}:generateContent"


def _payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_prompt_embeds_name_and_word_limit():
    prompt = build_prompt("  Ayşe Demir ")
    assert "Gönüllü ismi: Ayşe Demir." in prompt
    assert "maksimum 15 kelime" in prompt


def test_generated_message_is_returned_trimmed(fake_http, fake_response):
    http = fake_http({URL: fake_response(payload=_payload("  Katkınız bilime ışık tuttu.\n"))})
    result = generate_impact_message("Ayşe Demir", api_key="k", session=http)
    assert result.text == "Katkınız bilime ışık tuttu."
    assert result.fallback_used is False

    method, url, kwargs = http.calls[0]
    assert method == "POST"
    assert kwargs["headers"] == {"x-goog-api-key": "k"}
    body = kwargs["json"]
    assert "Ayşe Demir" in body["contents"][0]["parts"][0]["text"]
    assert body["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 100}


def test_missing_api_key_falls_back_without_calling(fake_http, caplog):
    http = fake_http()
    caplog.set_level("WARNING", logger="certportal")
    result = generate_impact_message("Ali", api_key="", session=http)
    assert result == (DEFAULT_GENERATED_MESSAGE, True, "missing api key")
    assert http.calls == []
    assert "[GEN-FAIL]" in caplog.text


@pytest.mark.parametrize(
    "answer",
    [
        requests.ConnectionError("unreachable"),
        requests.Timeout("slow"),
    ],
)
def test_transport_errors_fall_back(fake_http, answer):
    http = fake_http({URL: answer})
    assert compose_impact_message("Ali", api_key="k", session=http) == DEFAULT_GENERATED_MESSAGE


@pytest.mark.parametrize(
    "status,payload",
    [
        (500, _payload("ignored")),
        (200, None),
        (200, {"candidates": []}),
        (200, {"candidates": [{"content": {"parts": []}}]}),
        (200, _payload("   ")),
        (200, {"candidates": "garbage"}),
    ],
)
def test_bad_responses_fall_back(fake_http, fake_response, status, payload):
    http = fake_http({URL: fake_response(status_code=status, payload=payload)})
    result = generate_impact_message("Ali", api_key="k", session=http)
    assert result.text == DEFAULT_GENERATED_MESSAGE
    assert result.fallback_used is True
    assert len(http.calls) == 1


def test_default_session_without_network_falls_back():
    assert compose_impact_message("Ali", api_key="k") == DEFAULT_GENERATED_MESSAGE
