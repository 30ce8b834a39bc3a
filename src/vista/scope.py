"""Scope: the immutable (locals, context) pair handed to one render."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

EMPTY_LOCALS: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class Scope:
    """Locals and context for a single template or partial render.

    Attributes:
        locals: Named values visible to the template (read-only)
        context: Render-scoped Context carrying the active renderer
    """

    locals: Mapping[str, Any] = field(default_factory=lambda: EMPTY_LOCALS)
    context: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.locals, MappingProxyType):
            object.__setattr__(self, "locals", MappingProxyType(dict(self.locals)))

    def render(
        self,
        partial_name: str,
        caller: Callable[[], Any] | None = None,
        **locals: Any,
    ) -> Any:
        """Render a partial with a fresh scope sharing this scope's context.

        Args:
            partial_name: Partial name (resolved with a leading underscore)
            caller: Optional block the partial may call to embed content
            **locals: Locals for the partial

        Returns:
            Rendered partial content
        """
        scope = Scope(locals=locals, context=self.context)
        return self.context._renderer.partial(partial_name, scope, caller)
