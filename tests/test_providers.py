import pytest
import requests

from check_scam.exceptions import ProviderError
from check_scam.infrastructure import gemini, numverify, veriphone
from check_scam.infrastructure.gemini import GeminiOracle
from check_scam.infrastructure.numverify import NumverifyValidator
from check_scam.infrastructure.veriphone import VeriphoneValidator

from mocks import KEYED_CONFIG, FakeResponse


def _capture_get(monkeypatch, module, response):
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured.update(url=url, params=params, timeout=timeout)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(module.requests, "get", fake_get)
    return captured


def test_numverify_request_strips_plus(monkeypatch):
    captured = _capture_get(
        monkeypatch,
        numverify,
        FakeResponse({"valid": True, "line_type": "mobile", "carrier": "Viettel"}),
    )
    outcome = NumverifyValidator(KEYED_CONFIG).validate("+84972009161")
    assert captured["params"] == {
        "access_key": "nv-key",
        "number": "84972009161",
        "format": 1,
    }
    assert captured["timeout"] == KEYED_CONFIG.timeout
    assert outcome.succeeded
    assert outcome.data.valid is True
    assert outcome.data.carrier == "Viettel"


def test_numverify_empty_carrier_is_unknown(monkeypatch):
    _capture_get(
        monkeypatch,
        numverify,
        FakeResponse({"valid": False, "line_type": None, "carrier": ""}),
    )
    outcome = NumverifyValidator(KEYED_CONFIG).validate("+84972009161")
    assert outcome.data.line_type == "Unknown"
    assert outcome.data.carrier == "Unknown"


def test_numverify_error_payload(monkeypatch):
    _capture_get(
        monkeypatch,
        numverify,
        FakeResponse({"error": {"code": 101, "info": "invalid access key"}}),
    )
    outcome = NumverifyValidator(KEYED_CONFIG).validate("+84972009161")
    assert not outcome.succeeded
    assert "invalid access key" in outcome.error


@pytest.mark.parametrize(
    "failure",
    [requests.Timeout("read timed out"), requests.ConnectionError("refused")],
)
def test_numverify_transport_failure(monkeypatch, failure):
    _capture_get(monkeypatch, numverify, failure)
    outcome = NumverifyValidator(KEYED_CONFIG).validate("+84972009161")
    assert not outcome.succeeded


def test_numverify_malformed_json(monkeypatch):
    _capture_get(monkeypatch, numverify, FakeResponse(raise_json=True))
    assert not NumverifyValidator(KEYED_CONFIG).validate("+84972009161").succeeded


def test_veriphone_request_keeps_plus(monkeypatch):
    captured = _capture_get(
        monkeypatch,
        veriphone,
        FakeResponse(
            {
                "status": "success",
                "is_valid": True,
                "phone_type": "mobile",
                "carrier": "Mobifone",
                "risk_level": "high",
            }
        ),
    )
    outcome = VeriphoneValidator(KEYED_CONFIG).validate("+84972009161")
    assert captured["params"] == {"key": "vp-key", "phone": "+84972009161"}
    assert outcome.data.valid is True
    assert outcome.data.line_type == "mobile"
    assert outcome.data.risk_level == "high"
    assert outcome.data.flags_risk is True


def test_veriphone_absent_risk_level(monkeypatch):
    _capture_get(
        monkeypatch,
        veriphone,
        FakeResponse({"status": "success", "is_valid": True}),
    )
    outcome = VeriphoneValidator(KEYED_CONFIG).validate("+84972009161")
    assert outcome.data.risk_level is None
    assert outcome.data.flags_risk is False
    assert outcome.data.carrier == "Unknown"


@pytest.mark.parametrize(
    "payload",
    [{"status": "error", "error": "Invalid API key"}, {"status": "failed"}, ["x"]],
)
def test_veriphone_unsuccessful_payloads(monkeypatch, payload):
    _capture_get(monkeypatch, veriphone, FakeResponse(payload))
    assert not VeriphoneValidator(KEYED_CONFIG).validate("+84972009161").succeeded


def test_veriphone_timeout(monkeypatch):
    _capture_get(monkeypatch, veriphone, requests.Timeout("slow"))
    assert not VeriphoneValidator(KEYED_CONFIG).validate("+84972009161").succeeded


def _patch_post(monkeypatch, response):
    sent = {}

    def fake_post(url, json=None, timeout=None):
        sent.update(url=url, json=json, timeout=timeout)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(gemini.requests, "post", fake_post)
    return sent


def test_oracle_true(monkeypatch):
    sent = _patch_post(monkeypatch, FakeResponse({"result": "true"}))
    assert GeminiOracle(KEYED_CONFIG).is_scam("+84972009161") is True
    assert "+84972009161" in sent["json"]["prompt"]
    assert sent["url"] == KEYED_CONFIG.gemini_url


def test_oracle_true_ignores_case(monkeypatch):
    _patch_post(monkeypatch, FakeResponse({"result": "TRUE"}))
    assert GeminiOracle(KEYED_CONFIG).is_scam("+84972009161") is True


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"result": "false"}),
        FakeResponse({"result": "yes"}),
        FakeResponse({"result": " TRUE "}),
        FakeResponse({"result": "true\n"}),
        FakeResponse({"result": True}),
        FakeResponse({}),
        FakeResponse(raise_json=True),
        FakeResponse({"result": "true"}, status_code=500),
        requests.ConnectionError("down"),
    ],
)
def test_oracle_anything_else_is_false(monkeypatch, response):
    _patch_post(monkeypatch, response)
    assert GeminiOracle(KEYED_CONFIG).is_scam("+84972009161") is False


def test_fetch_scams_list(monkeypatch):
    _patch_post(
        monkeypatch,
        FakeResponse(
            [
                {
                    "name": "Fake bank officer",
                    "bank_account": "0123456789",
                    "phone_number": "0972 009 161",
                    "description": "Asks for OTP codes",
                    "extra": "ignored",
                }
            ]
        ),
    )
    scams = GeminiOracle(KEYED_CONFIG).fetch_scams()
    assert scams == [
        {
            "name": "Fake bank officer",
            "bank_account": "0123456789",
            "phone_number": "0972 009 161",
            "description": "Asks for OTP codes",
        }
    ]


def test_fetch_scams_wrapped_in_result(monkeypatch):
    _patch_post(monkeypatch, FakeResponse({"result": '[{"name": "A"}]'}))
    scams = GeminiOracle(KEYED_CONFIG).fetch_scams()
    assert scams[0]["name"] == "A"
    assert scams[0]["phone_number"] is None


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"result": "not json"}),
        FakeResponse({"message": "hi"}),
        FakeResponse([], status_code=503),
        requests.Timeout("slow"),
    ],
)
def test_fetch_scams_errors(monkeypatch, response):
    _patch_post(monkeypatch, response)
    with pytest.raises(ProviderError):
        GeminiOracle(KEYED_CONFIG).fetch_scams()
