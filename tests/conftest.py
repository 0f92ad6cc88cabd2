import json

import pytest
import requests

from zendesk_client.auth import ZendeskSession, build_auth_headers
from zendesk_client.monitoring import reset_api_tracking
from zendesk_client.secrets import SecretStore
from zendesk_client.exceptions import SecretRetrievalError


class FakeSecretStore(SecretStore):
    """In-memory secret store that records lookups."""

    def __init__(self, secrets=None):
        self.secrets = secrets or {}
        self.lookups = []

    def lookup(self, vault_name, secret_name):
        self.lookups.append((vault_name, secret_name))
        try:
            return self.secrets[(vault_name, secret_name)]
        except KeyError:
            raise SecretRetrievalError(f"{secret_name} not found in {vault_name}")


def make_response(status_code=200, body=None, text=None):
    response = requests.Response()
    response.status_code = status_code
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
    elif text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = b""
    return response


@pytest.fixture(autouse=True)
def reset_tracking():
    reset_api_tracking()
    yield
    reset_api_tracking()


@pytest.fixture
def secret_store():
    return FakeSecretStore({("KV1", "S1"): "abc123"})


@pytest.fixture
def session():
    return ZendeskSession(
        base_uri="https://tenant.zendesk.com/api/v2",
        auth_headers=build_auth_headers("foo@bar.com", "abc123"),
    )
