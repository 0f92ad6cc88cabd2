import pytest

from zendesk_client.config import DEFAULT_TIMEOUT, load_settings

ENV_VARS = (
    "ZENDESK_EMAIL",
    "ZENDESK_DOMAIN",
    "ZENDESK_VAULT",
    "ZENDESK_SECRET",
    "ZENDESK_SECRET_BACKEND",
    "ZENDESK_TIMEOUT",
    "AWS_REGION",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        # setenv first so values loaded from a .env file are undone at teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    # Keep a developer's ./.env out of the test
    return tmp_path / "missing.env"


def test_defaults(clean_env):
    settings = load_settings(str(clean_env))
    assert settings.email is None
    assert settings.secret_backend == "aws"
    assert settings.aws_region == "eu-west-2"
    assert settings.timeout == DEFAULT_TIMEOUT


def test_reads_environment(clean_env, monkeypatch):
    monkeypatch.setenv("ZENDESK_EMAIL", "foo@bar.com")
    monkeypatch.setenv("ZENDESK_DOMAIN", "tenant.zendesk.com")
    monkeypatch.setenv("ZENDESK_VAULT", "KV1")
    monkeypatch.setenv("ZENDESK_SECRET", "S1")
    monkeypatch.setenv("ZENDESK_SECRET_BACKEND", "ENV")
    monkeypatch.setenv("ZENDESK_TIMEOUT", "12.5")

    settings = load_settings(str(clean_env))

    assert settings.email == "foo@bar.com"
    assert settings.domain == "tenant.zendesk.com"
    assert settings.vault_name == "KV1"
    assert settings.secret_name == "S1"
    assert settings.secret_backend == "env"
    assert settings.timeout == 12.5


def test_reads_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ZENDESK_DOMAIN=fromfile.zendesk.com\n")
    settings = load_settings(str(env_file))
    assert settings.domain == "fromfile.zendesk.com"


def test_rejects_unknown_backend(clean_env, monkeypatch):
    monkeypatch.setenv("ZENDESK_SECRET_BACKEND", "vault9000")
    with pytest.raises(ValueError):
        load_settings(str(clean_env))


def test_rejects_bad_timeout(clean_env, monkeypatch):
    monkeypatch.setenv("ZENDESK_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        load_settings(str(clean_env))


def test_rejects_non_positive_timeout(clean_env, monkeypatch):
    monkeypatch.setenv("ZENDESK_TIMEOUT", "0")
    with pytest.raises(ValueError):
        load_settings(str(clean_env))
