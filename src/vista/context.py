"""Render context: the prototype object carrying per-render helpers.

Applications subclass Context to add helper methods and properties that
every template can reach through ``context``. The controller never mutates
the configured instance; it clones it per render with for_rendering().
"""

import copy
from typing import Any


class Context:
    """Prototype for per-render helpers.

    Usage:
        class AppContext(Context):
            @property
            def title(self) -> str:
                return "My app"

        controller(context=AppContext(), locals={...})
    """

    def __init__(self, renderer: Any = None, decorator: Any = None, **options: Any) -> None:
        """Initialize context.

        Args:
            renderer: Renderer bound for the current render step
            decorator: Decorator used by parts to decorate attributes
            **options: Additional state for helper methods
        """
        self._renderer = renderer
        self._decorator = decorator
        self._options = options

    def for_rendering(self, renderer: Any, decorator: Any) -> "Context":
        """Return a clone of this context bound to a renderer and decorator.

        The clone keeps the concrete subclass (and so its helpers) and all
        options; the receiver is left untouched.
        """
        clone = copy.copy(self)
        clone._renderer = renderer
        clone._decorator = decorator
        clone._options = dict(self._options)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        return (
            type(self) is type(other)
            and self._renderer == other._renderer
            and self._decorator == other._decorator
            and self._options == other._options
        )

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(renderer={self._renderer!r})"
