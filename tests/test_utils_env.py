"""Tests for the environment variable utility."""

import pytest

from migrator.utils.env import EnvVarTypeError, env_is_set, get_env


def test_get_env_basic(monkeypatch):
    """Test getting set variables and missing variables with defaults."""
    monkeypatch.setenv("MIGRATOR_TEST_VAR", "test_value")
    monkeypatch.delenv("MIGRATOR_MISSING_VAR", raising=False)

    assert get_env("MIGRATOR_TEST_VAR") == "test_value"
    assert get_env("MIGRATOR_MISSING_VAR", default="default") == "default"
    assert get_env("MIGRATOR_MISSING_VAR") is None


def test_get_env_coercion(monkeypatch):
    """Test type coercion for common types."""
    monkeypatch.setenv("MIGRATOR_BOOL_TRUE", "true")
    monkeypatch.setenv("MIGRATOR_BOOL_OFF", "off")
    monkeypatch.setenv("MIGRATOR_INT", "123")
    monkeypatch.setenv("MIGRATOR_FLOAT", "1.5")
    monkeypatch.setenv("MIGRATOR_LIST", "copy, reboot ")

    assert get_env("MIGRATOR_BOOL_TRUE", as_type=bool) is True
    assert get_env("MIGRATOR_BOOL_OFF", as_type=bool) is False
    assert get_env("MIGRATOR_INT", as_type=int) == 123
    assert get_env("MIGRATOR_FLOAT", as_type=float) == 1.5
    assert get_env("MIGRATOR_LIST", as_type=list) == ["copy", "reboot"]

    monkeypatch.setenv("MIGRATOR_INVALID_INT", "not_an_int")
    with pytest.raises(EnvVarTypeError) as exc_info:
        get_env("MIGRATOR_INVALID_INT", as_type=int)
    assert exc_info.value.name == "MIGRATOR_INVALID_INT"


def test_get_env_logging(monkeypatch, log_output):
    """Test access is logged, masked on request."""
    monkeypatch.setenv("MIGRATOR_ENGINE", "flasher")
    monkeypatch.setenv("MIGRATOR_SECRET", "hunter2")

    get_env("MIGRATOR_ENGINE", log=True)
    get_env("MIGRATOR_SECRET", log=True, mask_in_log=True)

    content = log_output.getvalue()
    assert "ENV GET MIGRATOR_ENGINE=flasher" in content
    assert "ENV GET MIGRATOR_SECRET=***" in content
    assert "hunter2" not in content


def test_env_is_set(monkeypatch):
    """Test empty values count as unset."""
    monkeypatch.setenv("MIGRATOR_SET", "1")
    monkeypatch.setenv("MIGRATOR_EMPTY", "")
    monkeypatch.delenv("MIGRATOR_UNSET", raising=False)

    assert env_is_set("MIGRATOR_SET")
    assert not env_is_set("MIGRATOR_EMPTY")
    assert not env_is_set("MIGRATOR_UNSET")
