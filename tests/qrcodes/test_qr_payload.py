import json

import pytest

from qrwork.core.exceptions import ValidationError
from qrwork.qrcodes.payload import QrPayload, parse_payload


def test_parse_accepts_text_and_dict():
    text = json.dumps({"companyCode": " acme1234 ", "qrCodeId": "7", "type": "CHECK_OUT"})

    from_text = parse_payload(text)
    from_dict = parse_payload({"companyCode": "ACME1234", "qrCodeId": 7})

    assert from_text.company_code == "ACME1234"
    assert from_text.qr_code_id == 7
    assert from_text.type == "CHECK_OUT"
    assert from_dict.qr_code_id == 7


def test_to_json_is_parseable():
    payload = QrPayload(company_code="ACME1234", qr_code_id=3, name="Cổng chính", location="Lobby")

    assert parse_payload(payload.to_json()) == payload
    assert "Cổng chính" in payload.to_json()


@pytest.mark.parametrize(
    "raw",
    [
        "https://example.com",
        '"just a string"',
        {"qrCodeId": 1},
        {"companyCode": "", "qrCodeId": 1},
        {"companyCode": "ACME1234", "qrCodeId": True},
        {"companyCode": "ACME1234", "qrCodeId": "seven"},
        42,
    ],
)
def test_rejects_malformed_payloads(raw):
    with pytest.raises(ValidationError):
        parse_payload(raw)
