"""
Configuration for the Zendesk ticket client.

Values are read from the environment. A .env file in the working
directory is loaded first when present.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Default request timeout in seconds
DEFAULT_TIMEOUT = 30

DEFAULT_AWS_REGION = "eu-west-2"

SECRET_BACKENDS = ("aws", "env")


@dataclass(frozen=True)
class Settings:
    email: Optional[str] = None
    domain: Optional[str] = None
    vault_name: Optional[str] = None
    secret_name: Optional[str] = None
    secret_backend: str = "aws"
    aws_region: str = DEFAULT_AWS_REGION
    timeout: float = DEFAULT_TIMEOUT


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env_file: Optional path to a .env file; defaults to ./.env

    Returns:
        Settings: The resolved configuration
    """
    load_dotenv(env_file)

    backend = os.getenv("ZENDESK_SECRET_BACKEND", "aws").strip().lower()
    if backend not in SECRET_BACKENDS:
        raise ValueError(
            f"ZENDESK_SECRET_BACKEND must be one of {', '.join(SECRET_BACKENDS)}, got {backend!r}"
        )

    timeout_str = os.getenv("ZENDESK_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(timeout_str)
    except ValueError:
        raise ValueError(f"ZENDESK_TIMEOUT must be a number, got {timeout_str!r}")
    if timeout <= 0:
        raise ValueError(f"ZENDESK_TIMEOUT must be positive, got {timeout_str!r}")

    return Settings(
        email=os.getenv("ZENDESK_EMAIL"),
        domain=os.getenv("ZENDESK_DOMAIN"),
        vault_name=os.getenv("ZENDESK_VAULT"),
        secret_name=os.getenv("ZENDESK_SECRET"),
        secret_backend=backend,
        aws_region=os.getenv("AWS_REGION", DEFAULT_AWS_REGION),
        timeout=timeout,
    )
