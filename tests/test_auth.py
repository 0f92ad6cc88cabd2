import base64
from unittest import mock

import pytest
import requests

from conftest import FakeSecretStore, make_response
from zendesk_client.auth import ZendeskSession, build_auth_headers, connect_zendesk, validate_domain
from zendesk_client.exceptions import ConnectivityError, SecretRetrievalError, ValidationError
from zendesk_client.monitoring import api_calls, api_failures


@pytest.mark.parametrize("domain", [
    "tenant.zendesk.com",
    "support.example.co.uk",
    "my-company.zendesk.com",
    "example.io",
])
def test_validate_domain_accepts_fqdn(domain):
    assert validate_domain(domain) == domain


@pytest.mark.parametrize("domain", [
    "",
    "localhost",
    "tenant.zendesk.c",
    "https://tenant.zendesk.com",
    "tenant.zendesk.com/",
    "tenant..com",
    "tenant.zendesk.123",
    "tenant.zendesk.com\n",
    " tenant.zendesk.com",
    None,
])
def test_validate_domain_rejects_malformed(domain):
    with pytest.raises(ValidationError):
        validate_domain(domain)


def test_build_auth_headers():
    headers = build_auth_headers("foo@bar.com", "abc123")

    expected = base64.b64encode(b"foo@bar.com/token:abc123").decode()
    assert headers == {
        "Authorization": f"Basic {expected}",
        "Content-Type": "application/json",
    }


def test_connect_builds_session(secret_store):
    with mock.patch("zendesk_client.client.requests.request", return_value=make_response(200, {"tickets": []})) as request:
        session = connect_zendesk(
            email="foo@bar.com",
            domain="tenant.zendesk.com",
            vault_name="KV1",
            secret_name="S1",
            secret_store=secret_store,
        )

    expected = base64.b64encode(b"foo@bar.com/token:abc123").decode()
    assert session.base_uri == "https://tenant.zendesk.com/api/v2"
    assert session.auth_headers["Authorization"] == f"Basic {expected}"
    assert session.auth_headers["Content-Type"] == "application/json"
    assert secret_store.lookups == [("KV1", "S1")]

    request.assert_called_once()
    args, kwargs = request.call_args
    assert args == ("GET", "https://tenant.zendesk.com/api/v2/tickets.json")
    assert kwargs["headers"]["Authorization"] == f"Basic {expected}"
    assert kwargs["data"] is None
    assert api_calls["authentication"] == 1


def test_malformed_domain_fails_before_lookup(secret_store):
    with mock.patch("zendesk_client.client.requests.request") as request:
        with pytest.raises(ValidationError):
            connect_zendesk(
                email="foo@bar.com",
                domain="not a domain",
                vault_name="KV1",
                secret_name="S1",
                secret_store=secret_store,
            )

    assert secret_store.lookups == []
    request.assert_not_called()


@pytest.mark.parametrize("domain", ["tenant.zendesk.com\n", "tenant"])
def test_domain_with_trailing_junk_fails_before_lookup(secret_store, domain):
    with mock.patch("zendesk_client.client.requests.request") as request:
        with pytest.raises(ValidationError):
            connect_zendesk(
                email="foo@bar.com",
                domain=domain,
                vault_name="KV1",
                secret_name="S1",
                secret_store=secret_store,
            )

    assert secret_store.lookups == []
    request.assert_not_called()


def test_invalid_email_rejected(secret_store):
    with pytest.raises(ValidationError):
        connect_zendesk(
            email="foo",
            domain="tenant.zendesk.com",
            vault_name="KV1",
            secret_name="S1",
            secret_store=secret_store,
        )
    assert secret_store.lookups == []


def test_missing_secret_raises_secret_retrieval_error(secret_store):
    with mock.patch("zendesk_client.client.requests.request") as request:
        with pytest.raises(SecretRetrievalError):
            connect_zendesk(
                email="foo@bar.com",
                domain="tenant.zendesk.com",
                vault_name="KV1",
                secret_name="missing",
                secret_store=secret_store,
            )
    request.assert_not_called()


def test_unexpected_store_failure_is_wrapped():
    store = mock.Mock()
    store.lookup.side_effect = RuntimeError("vault unreachable")

    with pytest.raises(SecretRetrievalError) as exc_info:
        connect_zendesk(
            email="foo@bar.com",
            domain="tenant.zendesk.com",
            vault_name="KV1",
            secret_name="S1",
            secret_store=store,
        )
    assert "vault unreachable" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_non_success_liveness_check_raises_connectivity_error(secret_store):
    with mock.patch("zendesk_client.client.requests.request", return_value=make_response(401, text="Couldn't authenticate you")):
        with pytest.raises(ConnectivityError) as exc_info:
            connect_zendesk(
                email="foo@bar.com",
                domain="tenant.zendesk.com",
                vault_name="KV1",
                secret_name="S1",
                secret_store=secret_store,
            )

    assert "401" in str(exc_info.value)
    assert api_failures["authentication"] == 1


def test_transport_failure_raises_connectivity_error(secret_store):
    with mock.patch("zendesk_client.client.requests.request", side_effect=requests.ConnectionError("DNS failure")):
        with pytest.raises(ConnectivityError):
            connect_zendesk(
                email="foo@bar.com",
                domain="tenant.zendesk.com",
                vault_name="KV1",
                secret_name="S1",
                secret_store=secret_store,
            )


def test_session_is_immutable(session):
    with pytest.raises(AttributeError):
        session.base_uri = "https://other.zendesk.com/api/v2"
    with pytest.raises(TypeError):
        session.auth_headers["Authorization"] = "Basic nope"


def test_session_repr_hides_credential(session):
    assert "Basic" not in repr(session)
    assert "tenant.zendesk.com" in repr(session)


def test_session_url(session):
    assert session.url("tickets/5.json") == "https://tenant.zendesk.com/api/v2/tickets/5.json"
    assert session.url("/tickets.json") == "https://tenant.zendesk.com/api/v2/tickets.json"
