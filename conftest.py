"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Isolation from PAGECRAFT_* variables set in the developer's shell
- Shared registry and template fixtures
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from pagecraft.config import EnvVar

if TYPE_CHECKING:
    from pagecraft.positioning import PositioningRegistry
    from pagecraft.registry import ComponentRegistry

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _clean_compiler_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset compiler limits so tests run against the documented defaults."""
    for env_var in EnvVar:
        if env_var.value.category in ("limits", "compiler"):
            monkeypatch.delenv(env_var.value.name, raising=False)


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def component_registry() -> ComponentRegistry:
    """Frozen registry holding the default component catalog."""
    from pagecraft.registry import build_default_registry

    return build_default_registry()


@pytest.fixture
def positioning_registry() -> PositioningRegistry:
    """Fresh strategy registry; tests may clear it without affecting others."""
    from pagecraft.positioning import build_default_positioning_registry

    return build_default_positioning_registry()


@pytest.fixture
def profile_template() -> str:
    """A realistic profile page mixing plain HTML, layout and placed components.

    Returns:
        Template markup with a style block, a navigation bar, a tabbed
        section and absolutely positioned widgets.
    """
    return """<!DOCTYPE html>
<html>
<head>
  <style>.profile { color: #222; }</style>
</head>
<body>
  <NavigationBar _positioning='{"mode": "absolute", "x": 0, "y": 0}' />
  <div class="profile">
    <ProfilePhoto size="lg" _positioning='{"breakpoints": {"desktop": {"x": 40, "y": 120, "zIndex": 2}}}' />
    <DisplayName as="h1" _size='{"width": 320}' />
    <Bio background-color="#fafafa" />
    <Tabs _positioning='{"column": 1, "row": 2, "span": 2}'>
      <Tab title="Posts"><BlogPosts limit="3" /></Tab>
      <Tab title="Friends"><FriendDisplay /></Tab>
    </Tabs>
  </div>
</body>
</html>
"""
