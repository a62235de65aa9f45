"""
Unit tests for payload schemas and the record view.
"""

import pytest
from pydantic import ValidationError

from npm_mcp.models import (
    AccessListPayload,
    CertificatePayload,
    DeadHostUpdate,
    PAYLOAD_MODELS,
    ProxyHostPayload,
    ProxyHostUpdate,
    RedirectionHostPayload,
    ResourceRecord,
)


class TestPayloads:
    """Tests for create/update payload validation."""

    def test_proxy_host_drops_unset_fields(self):
        payload = ProxyHostPayload(
            domain_names=["app.example.com"],
            forward_scheme="https",
            forward_host="backend",
            forward_port=443,
            ssl_forced=True,
        ).to_payload()

        assert payload == {
            "domain_names": ["app.example.com"],
            "forward_scheme": "https",
            "forward_host": "backend",
            "forward_port": 443,
            "ssl_forced": True,
        }

    def test_proxy_host_rejects_bad_port(self):
        with pytest.raises(ValidationError):
            ProxyHostPayload(
                domain_names=["a"], forward_scheme="http", forward_host="b", forward_port=70000
            )

    def test_certificate_reference_accepts_new_sentinel(self):
        assert DeadHostUpdate(certificate_id="new").to_payload() == {"certificate_id": "new"}
        assert DeadHostUpdate(certificate_id=0).to_payload() == {"certificate_id": 0}
        with pytest.raises(ValidationError):
            DeadHostUpdate(certificate_id="old")
        with pytest.raises(ValidationError):
            DeadHostUpdate(certificate_id=-1)

    def test_update_models_are_partial(self):
        assert ProxyHostUpdate(forward_port=8080).to_payload() == {"forward_port": 8080}
        assert DeadHostUpdate().to_payload() == {}

    def test_redirection_code_range(self):
        with pytest.raises(ValidationError):
            RedirectionHostPayload(
                domain_names=["a"],
                forward_http_code=200,
                forward_scheme="auto",
                forward_domain_name="b",
            )

    def test_access_list_nested_items(self):
        payload = AccessListPayload(
            name="office",
            clients=[{"address": "10.0.0.0/8", "directive": "allow"}],
            items=[{"username": "ops", "password": "secret"}],
        ).to_payload()

        assert payload["clients"] == [{"address": "10.0.0.0/8", "directive": "allow"}]
        assert payload["items"] == [{"username": "ops", "password": "secret"}]

    def test_certificate_meta(self):
        payload = CertificatePayload(
            provider="letsencrypt",
            domain_names=["a.example.com"],
            meta={"letsencrypt_email": "ops@example.com", "letsencrypt_agree": True},
        ).to_payload()
        assert payload["meta"] == {"letsencrypt_email": "ops@example.com", "letsencrypt_agree": True}

    def test_every_kind_has_a_create_schema(self):
        from npm_mcp.endpoints import RESOURCES

        assert set(PAYLOAD_MODELS) == set(RESOURCES)
        for kind, (create_model, update_model) in PAYLOAD_MODELS.items():
            assert create_model is not None
            assert (update_model is not None) == RESOURCES[kind].supports("update")


class TestResourceRecord:
    """Tests for the typed view over upstream records."""

    def test_numeric_enabled_and_extra_fields(self):
        record = ResourceRecord.model_validate(
            {"id": 4, "enabled": 1, "domain_names": ["a.example.com"], "ssl_forced": 0}
        )
        assert record.enabled is True
        assert record.model_extra == {"ssl_forced": 0}
        assert record.describe("404 host") == "404 host 4 (a.example.com)"

    def test_describe_without_domains(self):
        assert ResourceRecord(id=2).describe("Access list") == "Access list 2"
