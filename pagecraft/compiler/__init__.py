"""Template compiler.

Example usage:
    >>> from pagecraft.compiler import compile_template
    >>> from pagecraft.registry import build_default_registry
    >>> result = compile_template("<Tabs><Tab title='One'>Hi</Tab></Tabs>", build_default_registry())
    >>> result.success
    True
    >>> [island.component for island, _ in result.ast.iter_islands()]
    ['Tabs', 'Tab']
"""

from .lib import ISLAND_ATTRIBUTE, CompilationResult, compile_template

__all__ = [
    "ISLAND_ATTRIBUTE",
    "CompilationResult",
    "compile_template",
]
