"""Tests for configuration management."""

import pytest

from pagecraft.config import (
    CompilerLimits,
    EnvConfig,
    EnvVar,
    get_compiler_limits,
    get_environment,
    get_environment_info,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("PAGECRAFT_MAX_NODES", raising=False)
        assert get_environment(EnvVar.MAX_NODES) == 1500

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("PAGECRAFT_MAX_NODES", "9999")
        assert get_environment(EnvVar.MAX_NODES, override=50) == 50

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("PAGECRAFT_MAX_DEPTH", "12")
        result = get_environment(EnvVar.MAX_DEPTH)
        assert result == 12
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("PAGECRAFT_MAX_SIZE_KB", "12.5")
        assert get_environment(EnvVar.MAX_SIZE_KB) == 12.5

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable numbers fall back to the default."""
        monkeypatch.setenv("PAGECRAFT_MAX_NODES", "lots")
        assert get_environment(EnvVar.MAX_NODES) == 1500

    @pytest.mark.unit
    def test_bool_type_conversion(self, monkeypatch):
        """Boolean type conversion for true and false values."""
        for value in ("true", "1", "yes", "TRUE"):
            monkeypatch.setenv("PAGECRAFT_STRICT_ATTRIBUTES", value)
            assert get_environment(EnvVar.STRICT_ATTRIBUTES) is True
        for value in ("false", "0", "no", "No"):
            monkeypatch.setenv("PAGECRAFT_STRICT_ATTRIBUTES", value)
            assert get_environment(EnvVar.STRICT_ATTRIBUTES) is False

    @pytest.mark.unit
    def test_unrecognized_bool_uses_default(self, monkeypatch):
        """Unrecognized boolean strings use the default."""
        monkeypatch.setenv("PAGECRAFT_STRICT_ATTRIBUTES", "maybe")
        assert get_environment(EnvVar.STRICT_ATTRIBUTES) is True


class TestIntrospection:
    """Tests for metadata access."""

    @pytest.mark.unit
    def test_environment_info(self):
        """EnvConfig metadata is exposed."""
        info = get_environment_info(EnvVar.MAX_DEPTH)
        assert isinstance(info, EnvConfig)
        assert info.name == "PAGECRAFT_MAX_DEPTH"
        assert info.category == "limits"

    @pytest.mark.unit
    def test_list_by_category(self):
        """Variables can be filtered by category."""
        limits = list_environment_variables("limits")
        assert set(limits) == {
            EnvVar.MAX_NODES,
            EnvVar.MAX_DEPTH,
            EnvVar.MAX_SIZE_KB,
            EnvVar.MAX_COMPONENTS,
        }
        assert len(list_environment_variables()) == len(EnvVar)

    @pytest.mark.unit
    def test_all_names_prefixed(self):
        """Every variable lives in the PAGECRAFT_ namespace."""
        for var in EnvVar:
            assert var.value.name.startswith("PAGECRAFT_")


class TestCompilerLimits:
    """Tests for get_compiler_limits."""

    @pytest.mark.unit
    def test_defaults(self, monkeypatch):
        """Defaults match the documented budgets."""
        for var in EnvVar:
            monkeypatch.delenv(var.value.name, raising=False)
        assert get_compiler_limits() == CompilerLimits()

    @pytest.mark.unit
    def test_environment_and_overrides(self, monkeypatch):
        """Overrides beat environment values, which beat defaults."""
        monkeypatch.setenv("PAGECRAFT_MAX_NODES", "100")
        monkeypatch.setenv("PAGECRAFT_MAX_DEPTH", "5")
        limits = get_compiler_limits(max_depth=8)
        assert limits.max_nodes == 100
        assert limits.max_depth == 8
