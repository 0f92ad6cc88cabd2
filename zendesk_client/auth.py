"""
Session builder for the Zendesk API.

A ZendeskSession bundles the API root and the Basic auth headers built
from an agent email and an API token held in a secret store. Sessions
are only handed out after a successful liveness check.
"""

import base64
import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

import requests

from zendesk_client.client import is_success, send_request
from zendesk_client.config import load_settings
from zendesk_client.exceptions import (
    ConnectivityError,
    SecretRetrievalError,
    ValidationError,
)
from zendesk_client.secrets import SecretStore, get_secret_store

logger = logging.getLogger(__name__)

DOMAIN_PATTERN = re.compile(r"^([a-zA-Z0-9-]+\.)+[a-zA-Z]{2,}$")


@dataclass(frozen=True)
class ZendeskSession:
    """
    Immutable API root and auth headers for one Zendesk tenant.

    Attributes:
        base_uri: API root, https://{domain}/api/v2
        auth_headers: Read-only Authorization and Content-Type headers
    """

    base_uri: str
    auth_headers: Mapping[str, str]

    def __post_init__(self):
        object.__setattr__(self, "auth_headers", MappingProxyType(dict(self.auth_headers)))

    def url(self, path: str) -> str:
        return f"{self.base_uri}/{path.lstrip('/')}"

    def __repr__(self) -> str:
        # Keep the credential out of logs and tracebacks
        return f"ZendeskSession(base_uri={self.base_uri!r})"


def validate_domain(domain: str) -> str:
    """
    Check that a domain is a fully-qualified name like tenant.zendesk.com.

    Raises:
        ValidationError: If the domain is not FQDN-shaped
    """
    if not isinstance(domain, str) or not DOMAIN_PATTERN.fullmatch(domain):
        raise ValidationError(f"Invalid domain {domain!r}; expected a name like tenant.zendesk.com")
    return domain


def build_auth_headers(email: str, api_token: str) -> dict:
    """
    Build the headers for Zendesk API token authentication.

    The username is the agent email with a /token suffix.
    """
    credential = f"{email}/token:{api_token}"
    encoded = base64.b64encode(credential.encode("utf-8")).decode("ascii")
    return {
        "Authorization": f"Basic {encoded}",
        "Content-Type": "application/json",
    }


def check_connectivity(session: ZendeskSession) -> None:
    """
    Verify that the session can reach the tenant and is authorized.

    Raises:
        ConnectivityError: On transport failure or a non-2xx response
    """
    url = session.url("tickets.json")
    try:
        response = send_request("GET", url, session.auth_headers, category="authentication")
    except requests.RequestException as e:
        raise ConnectivityError(f"Could not reach {url}: {e}") from e

    if not is_success(response):
        raise ConnectivityError(
            f"Authentication check failed: {response.status_code} - {response.text}"
        )


def connect_zendesk(
    *,
    email: str,
    domain: str,
    vault_name: str,
    secret_name: str,
    secret_store: Optional[SecretStore] = None,
) -> ZendeskSession:
    """
    Build a verified session for a Zendesk tenant.

    Args:
        email: Agent email used for API token authentication
        domain: Tenant domain, e.g. tenant.zendesk.com
        vault_name: Vault holding the API token
        secret_name: Name of the API token secret in the vault
        secret_store: Store to read the token from; defaults to the configured one

    Returns:
        ZendeskSession: The verified session

    Raises:
        ValidationError: If an argument is malformed
        SecretRetrievalError: If the token cannot be read
        ConnectivityError: If the liveness check fails
    """
    validate_domain(domain)
    if not isinstance(email, str) or "@" not in email:
        raise ValidationError(f"Invalid email {email!r}")
    if not vault_name or not secret_name:
        raise ValidationError("Both vault name and secret name are required")

    if secret_store is None:
        secret_store = get_secret_store(load_settings())

    try:
        api_token = secret_store.lookup(vault_name, secret_name)
    except SecretRetrievalError as e:
        logger.error("[ERROR] %s", e)
        raise
    except Exception as e:
        logger.error("[ERROR] Secret lookup failed for %s/%s: %s", vault_name, secret_name, e)
        raise SecretRetrievalError(f"Secret lookup failed for {vault_name}/{secret_name}: {e}") from e

    session = ZendeskSession(
        base_uri=f"https://{domain}/api/v2",
        auth_headers=build_auth_headers(email, api_token),
    )

    logger.info("Testing Zendesk API authentication against %s...", domain)
    try:
        check_connectivity(session)
    except ConnectivityError as e:
        logger.error("[ERROR] %s", e)
        raise

    logger.info("[SUCCESS] Connected to %s as %s", domain, email)
    return session
