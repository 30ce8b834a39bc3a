"""Shared pytest fixtures for Vista tests.

Fixtures are organized by category:
- Path fixtures: template directories under tests/fixtures
- Context fixtures: a context with helpers like the ones applications write
- Rendering fixtures: recording collaborators for decoration and partials
"""

from pathlib import Path
from typing import Any

import pytest

from vista import Context, Decorator, Scope

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def templates_dir(fixtures_dir: Path) -> Path:
    """Return the main template root."""
    return fixtures_dir / "templates"


@pytest.fixture
def override_templates_dir(fixtures_dir: Path) -> Path:
    """Return a template root that overrides some main templates."""
    return fixtures_dir / "templates_override"


# =============================================================================
# Context Fixtures
# =============================================================================


class AppContext(Context):
    """Context with the helpers the fixture templates use."""

    @property
    def title(self) -> str:
        return "vista rocks!"

    def assets(self, name: str) -> str:
        return f"{name}.jpg"


@pytest.fixture
def app_context() -> AppContext:
    """Return an application context prototype."""
    return AppContext()


@pytest.fixture
def users() -> list[dict[str, str]]:
    """Return raw user records."""
    return [
        {"name": "Jane", "email": "jane@doe.org"},
        {"name": "Joe", "email": "joe@doe.org"},
    ]


# =============================================================================
# Rendering Fixtures
# =============================================================================


class RecordingDecorator(Decorator):
    """Decorator that records every call and its result."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any, Any, dict[str, Any]]] = []
        self.results: list[Any] = []

    def __call__(self, name: str, value: Any, context: Any, **options: Any) -> Any:
        self.calls.append((name, value, context, options))
        result = super().__call__(name, value, context, **options)
        self.results.append(result)
        return result


class RecordingRenderer:
    """Renderer stand-in that records partial renders."""

    def __init__(self, output: str = "rendered") -> None:
        self.output = output
        self.partials: list[tuple[str, Scope, Any]] = []

    def partial(self, name: str, scope: Scope, block: Any = None) -> str:
        self.partials.append((name, scope, block))
        return self.output


@pytest.fixture
def recording_decorator() -> RecordingDecorator:
    """Return a decorator that records its calls."""
    return RecordingDecorator()


@pytest.fixture
def recording_renderer() -> RecordingRenderer:
    """Return a renderer that records partial renders."""
    return RecordingRenderer()


@pytest.fixture
def render_context(
    recording_renderer: RecordingRenderer,
    recording_decorator: RecordingDecorator,
) -> Context:
    """Return a context bound to the recording collaborators."""
    return Context().for_rendering(recording_renderer, recording_decorator)
