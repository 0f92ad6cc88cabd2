"""
Secret stores used to resolve the Zendesk API token.

A secret is addressed by a vault name and a secret name. For AWS Secrets
Manager the vault is the secret id and the secret name is a key of its
JSON value. A plain-string secret value is returned as is.
"""

import json
import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Optional

import boto3

from zendesk_client.config import Settings
from zendesk_client.exceptions import SecretRetrievalError

logger = logging.getLogger(__name__)


class SecretStore(ABC):
    """Interface for looking up a plaintext secret by vault and name."""

    @abstractmethod
    def lookup(self, vault_name: str, secret_name: str) -> str:
        """Return the secret value or raise SecretRetrievalError."""


class AwsSecretsManagerStore(SecretStore):
    """
    Reads secrets from AWS Secrets Manager.

    Attributes:
        region_name: AWS region hosting the secrets
        client: Optional pre-built boto3 secretsmanager client
    """

    def __init__(self, region_name: str, client=None):
        self.region_name = region_name
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(service_name="secretsmanager", region_name=self.region_name)
        return self._client

    def lookup(self, vault_name: str, secret_name: str) -> str:
        logger.debug("Getting secret %s from vault %s", secret_name, vault_name)
        try:
            response = self.client.get_secret_value(SecretId=vault_name)
        except Exception as e:
            raise SecretRetrievalError(
                f"Failed to read vault {vault_name!r} from AWS Secrets Manager: {e}"
            ) from e

        # Check if the secret is stored as plaintext or binary
        if "SecretString" in response:
            secret = response["SecretString"]
        else:
            secret = response["SecretBinary"].decode("utf-8")

        if not secret.lstrip().startswith("{"):
            return secret

        try:
            values = json.loads(secret)
        except json.JSONDecodeError as e:
            raise SecretRetrievalError(f"Vault {vault_name!r} does not hold valid JSON: {e}") from e

        value = values.get(secret_name)
        if not value:
            raise SecretRetrievalError(f"Secret {secret_name!r} not found in vault {vault_name!r}")
        return str(value)


class EnvironmentSecretStore(SecretStore):
    """
    Reads secrets from environment variables named VAULT_SECRET.

    For vault "kv-support" and secret "zendesk-token" the variable is
    KV_SUPPORT_ZENDESK_TOKEN.
    """

    def __init__(self, environ: Optional[dict] = None):
        self.environ = os.environ if environ is None else environ

    @staticmethod
    def variable_name(vault_name: str, secret_name: str) -> str:
        raw = f"{vault_name}_{secret_name}"
        return re.sub(r"[^A-Za-z0-9]", "_", raw).upper()

    def lookup(self, vault_name: str, secret_name: str) -> str:
        name = self.variable_name(vault_name, secret_name)
        value = self.environ.get(name)
        if not value:
            raise SecretRetrievalError(f"Environment variable {name} is not set")
        return value


def get_secret_store(settings: Settings) -> SecretStore:
    """Return the secret store selected by the configuration."""
    if settings.secret_backend == "env":
        return EnvironmentSecretStore()
    return AwsSecretsManagerStore(region_name=settings.aws_region)
