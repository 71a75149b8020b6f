"""Centralized environment configuration management for pagecraft.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from pagecraft.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> max_nodes = get_environment(EnvVar.MAX_NODES)  # Returns int
    >>> strict = get_environment(EnvVar.STRICT_ATTRIBUTES)  # Returns bool
    >>>
    >>> # Override at runtime
    >>> max_nodes = get_environment(EnvVar.MAX_NODES, override=500)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "PAGECRAFT_MAX_NODES").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by pagecraft.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - limits: Hard compilation budgets
        - compiler: Compiler behavior switches
        - logging: Log output configuration
    """

    # -------------------------------------------------------------------------
    # Compilation Budgets
    # -------------------------------------------------------------------------
    MAX_NODES = EnvConfig(
        name="PAGECRAFT_MAX_NODES",
        default=1500,
        var_type=int,
        description="Maximum number of nodes in a parsed template",
        category="limits",
    )
    MAX_DEPTH = EnvConfig(
        name="PAGECRAFT_MAX_DEPTH",
        default=30,
        var_type=int,
        description="Maximum nesting depth of a parsed template",
        category="limits",
    )
    MAX_SIZE_KB = EnvConfig(
        name="PAGECRAFT_MAX_SIZE_KB",
        default=64.0,
        var_type=float,
        description="Maximum template size in kilobytes (UTF-8 encoded)",
        category="limits",
    )
    MAX_COMPONENTS = EnvConfig(
        name="PAGECRAFT_MAX_COMPONENTS",
        default=250,
        var_type=int,
        description="Maximum number of registered component instances",
        category="limits",
    )

    # -------------------------------------------------------------------------
    # Compiler Behavior
    # -------------------------------------------------------------------------
    STRICT_ATTRIBUTES = EnvConfig(
        name="PAGECRAFT_STRICT_ATTRIBUTES",
        default=True,
        var_type=bool,
        description="Reject unknown component attributes instead of warning",
        category="compiler",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="PAGECRAFT_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the pagecraft logger (DEBUG, INFO, ...)",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is float:
        try:
            return float(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...


@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...


@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...


@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...


@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, float, or bool).

    Example:
        >>> get_environment(EnvVar.MAX_DEPTH)
        30
        >>> get_environment(EnvVar.MAX_DEPTH, override=10)
        10
    """
    config: EnvConfig = env_var.value

    # Override takes highest priority
    if override is not None:
        return override

    # Check environment
    raw_value = os.environ.get(config.name)

    # Convert and return
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (limits, compiler, logging).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)
    return [var for var in EnvVar if var.value.category == category]


# =============================================================================
# Compiler Limits
# =============================================================================


@dataclass(frozen=True)
class CompilerLimits:
    """Hard budgets enforced before any expensive tree walk.

    Attributes:
        max_nodes: Maximum node count (elements and text runs).
        max_depth: Maximum nesting depth below the document root.
        max_size_kb: Maximum UTF-8 size of the raw markup in kilobytes.
        max_components: Maximum number of registered component instances.
        strict_attributes: Unknown attributes are errors (True) or warnings.
    """

    max_nodes: int = 1500
    max_depth: int = 30
    max_size_kb: float = 64.0
    max_components: int = 250
    strict_attributes: bool = True


def get_compiler_limits(**overrides: Any) -> CompilerLimits:
    """Build CompilerLimits from the environment.

    Args:
        **overrides: Field overrides (e.g. ``max_nodes=200``), taking
            priority over environment values.

    Returns:
        CompilerLimits with every field resolved.
    """
    return CompilerLimits(
        max_nodes=get_environment(EnvVar.MAX_NODES, overrides.get("max_nodes")),
        max_depth=get_environment(EnvVar.MAX_DEPTH, overrides.get("max_depth")),
        max_size_kb=get_environment(
            EnvVar.MAX_SIZE_KB, overrides.get("max_size_kb")
        ),
        max_components=get_environment(
            EnvVar.MAX_COMPONENTS, overrides.get("max_components")
        ),
        strict_attributes=get_environment(
            EnvVar.STRICT_ATTRIBUTES, overrides.get("strict_attributes")
        ),
    )


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Introspection
    "list_environment_variables",
    # Limits
    "CompilerLimits",
    "get_compiler_limits",
]
