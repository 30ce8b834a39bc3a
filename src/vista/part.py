"""Parts: decorating wrappers around values handed to templates.

A part wraps one raw value. Attribute access on a part resolves through a
fixed chain:

1. Attributes declared with ``decorate()`` are fetched from the value,
   decorated through the context's decorator, and memoized per instance.
2. Anything the value itself provides is forwarded to the value.
3. ``context``, ``render`` and ``value`` reach the part's own accessors.
4. Everything else raises UnsupportedMemberAccess.

Container protocol methods (``len()``, iteration, subscripting, ``in``,
truthiness) are delegated to the value explicitly.
"""

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from vista.errors import UnsupportedMemberAccess
from vista.scope import Scope

CONVENIENCE_METHODS = frozenset({"context", "render", "value"})

# Set in __init__; never forwarded to the wrapped value
_INTERNAL_ATTRIBUTES = frozenset(
    {"_name", "_value", "_context", "_decorated_attribute_cache"}
)

_UNSET = object()


class Part:
    """Decorating wrapper around a single value.

    Attributes:
        _name: Local or attribute name the part was created for
        _value: The wrapped raw value
        _context: Render-scoped context (renderer and decorator access)

    Usage:
        class ArticlePart(Part):
            def title_upcased(self) -> str:
                return self._value["title"].upper()

        ArticlePart.decorate("author", as_=AuthorPart)
    """

    decorated_attributes: dict[str, dict[str, Any]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.decorated_attributes = {
            name: dict(options) for name, options in cls.decorated_attributes.items()
        }

    @classmethod
    def decorate(cls, *names: str, **options: Any) -> None:
        """Declare attributes whose values are decorated on access.

        Args:
            *names: Attribute names to decorate
            **options: Decoration options passed to the decorator (e.g. as_)
        """
        for name in names:
            cls.decorated_attributes[name] = options

    def __init__(self, name: str, value: Any, context: Any = None) -> None:
        self._name = name
        self._value = value
        self._context = context
        self._decorated_attribute_cache: dict[str, Any] = {}

    def __getattr__(self, name: str) -> Any:
        if name in _INTERNAL_ATTRIBUTES or name.startswith("__"):
            raise AttributeError(name)

        if name in type(self).decorated_attributes:
            return self._resolve_decorated_attribute(name)

        attribute = getattr(self._value, name, _UNSET)
        if attribute is not _UNSET:
            return attribute

        if name in CONVENIENCE_METHODS:
            return getattr(self, f"_{name}")

        raise UnsupportedMemberAccess(name, self._name)

    def _render(
        self,
        partial_name: str,
        as_: str | None = None,
        caller: Callable[[], Any] | None = None,
        **locals: Any,
    ) -> Any:
        """Render a partial with this part available as a local.

        Args:
            partial_name: Partial name (resolved with a leading underscore)
            as_: Local name for this part (defaults to the part's own name)
            caller: Optional block forwarded unchanged to the renderer
            **locals: Additional locals for the partial

        Returns:
            Rendered partial content
        """
        scope = self._render_scope(as_ or self._name, locals)
        return self._context._renderer.partial(partial_name, scope, caller)

    def new(
        self,
        klass: type["Part"] | None = None,
        name: str | None = None,
        value: Any = _UNSET,
        **options: Any,
    ) -> "Part":
        """Build another part linked to the same render context.

        Args:
            klass: Part class to build (defaults to this part's class)
            name: Name for the new part (defaults to this part's name)
            value: Value for the new part (defaults to this part's value)
            **options: Extra constructor arguments for klass

        Returns:
            New part instance sharing this part's context
        """
        klass = klass or type(self)
        return klass(
            name=self._name if name is None else name,
            value=self._value if value is _UNSET else value,
            context=self._context,
            **options,
        )

    def _render_scope(self, name: str, locals: Mapping[str, Any]) -> Scope:
        return Scope(locals={**locals, name: self}, context=self._context)

    def _resolve_decorated_attribute(self, name: str) -> Any:
        cache = self._decorated_attribute_cache
        if name in cache:
            return cache[name]

        attribute = _fetch_attribute(self._value, name)
        if attribute:
            # Decorate truthy attributes only
            attribute = self._context._decorator(
                name,
                attribute,
                self._context,
                **type(self).decorated_attributes[name],
            )

        cache[name] = attribute
        return attribute

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, value={self._value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Part):
            return NotImplemented
        return (
            self._name == other._name
            and self._value == other._value
            and self._context == other._context
        )

    def __hash__(self) -> int:
        return hash(self._name)

    def __bool__(self) -> bool:
        return bool(self._value)

    def __len__(self) -> int:
        return len(self._value)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._value)

    def __getitem__(self, key: Any) -> Any:
        return self._value[key]

    def __contains__(self, item: Any) -> bool:
        return item in self._value


def _fetch_attribute(value: Any, name: str) -> Any:
    """Read a raw attribute: a key for mappings, an attribute otherwise."""
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name)
