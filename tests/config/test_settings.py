"""Tests for StoreSettings."""

from kvmapper.config import StoreSettings


def test_defaults(monkeypatch):
    """Without environment, settings point at a local default Redis."""
    for name in ("URL", "HOST", "PORT", "PASSWORD", "DB", "SOCKET_TIMEOUT"):
        monkeypatch.delenv(f"KVMAPPER_REDIS_{name}", raising=False)

    settings = StoreSettings(_env_file=None)

    assert settings.url is None
    assert settings.host == "localhost"
    assert settings.port == 6379
    assert settings.password is None
    assert settings.db == 0
    assert settings.socket_timeout is None


def test_environment_overrides(monkeypatch):
    """KVMAPPER_REDIS_* variables are read and coerced to field types."""
    monkeypatch.setenv("KVMAPPER_REDIS_HOST", "cache.internal")
    monkeypatch.setenv("KVMAPPER_REDIS_PORT", "6380")
    monkeypatch.setenv("KVMAPPER_REDIS_PASSWORD", "secret")
    monkeypatch.setenv("KVMAPPER_REDIS_SOCKET_TIMEOUT", "2.5")

    settings = StoreSettings(_env_file=None)

    assert settings.host == "cache.internal"
    assert settings.port == 6380
    assert settings.password == "secret"
    assert settings.socket_timeout == 2.5


def test_explicit_values_win(monkeypatch):
    """Constructor arguments override the environment."""
    monkeypatch.setenv("KVMAPPER_REDIS_HOST", "from-env")

    settings = StoreSettings(_env_file=None, host="explicit")

    assert settings.host == "explicit"


def test_unrelated_variables_ignored(monkeypatch):
    """Other prefixes do not leak in."""
    monkeypatch.setenv("REDIS_HOST", "elsewhere")
    monkeypatch.delenv("KVMAPPER_REDIS_HOST", raising=False)

    assert StoreSettings(_env_file=None).host == "localhost"
