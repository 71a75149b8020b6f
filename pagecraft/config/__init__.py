"""Centralized configuration management for pagecraft.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from pagecraft.config import EnvVar, get_environment
    >>>
    >>> # Get any environment variable with automatic type conversion
    >>> max_nodes = get_environment(EnvVar.MAX_NODES)  # Returns int: 1500
    >>>
    >>> # Override at runtime
    >>> max_nodes = get_environment(EnvVar.MAX_NODES, override=200)
    >>>
    >>> # Build the compiler budgets in one call
    >>> limits = get_compiler_limits(max_depth=10)

Environment Variable Categories:
    limits: Hard compilation budgets (nodes, depth, size, components)
    compiler: Compiler behavior switches (strict attribute checking)
    logging: Log level
"""

from .lib import (
    # Limits
    CompilerLimits,
    # Core types
    EnvConfig,
    EnvVar,
    get_compiler_limits,
    # Main interface
    get_environment,
    get_environment_info,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Limits
    "CompilerLimits",
    "get_compiler_limits",
    # Introspection
    "list_environment_variables",
]
