from __future__ import annotations

import pytest

from instarelay.config import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
    optional_env_var,
    require_env_var,
    require_env_vars,
)
from instarelay.config.env import optional_float_env_var


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.delenv("MISSING_A", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert exc.value.names == ("MISSING_A", "MISSING_B")
    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  ")

    assert optional_env_var("EXAMPLE_VAR", "fallback") == "fallback"
    monkeypatch.setenv("EXAMPLE_VAR", " set ")
    assert optional_env_var("EXAMPLE_VAR", "fallback") == "set"


def test_optional_float_env_var(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_FLOAT", raising=False)
    assert optional_float_env_var("EXAMPLE_FLOAT", 1.5) == 1.5

    monkeypatch.setenv("EXAMPLE_FLOAT", "2.25")
    assert optional_float_env_var("EXAMPLE_FLOAT") == 2.25

    monkeypatch.setenv("EXAMPLE_FLOAT", "soon")
    with pytest.raises(ConfigurationError, match="EXAMPLE_FLOAT") as exc:
        optional_float_env_var("EXAMPLE_FLOAT")
    assert isinstance(exc.value, InvalidConfigurationError)
    assert isinstance(exc.value, ValueError)
    assert exc.value.name == "EXAMPLE_FLOAT"
