"""Exposures: named computations that turn controller input into locals.

An exposure's dependencies come from its signature. A parameter named
after another exposure receives that exposure's value; any other named
parameter receives the input value of the same name (or its default); a
``**kwargs`` parameter receives the whole input.

Usage:
    class UsersView(Controller):
        template = "users"

        @expose
        def users(self, page: int = 1) -> list[dict]:
            return repo.page(page)

        @expose(as_=SummaryPart)
        def summary(self, users: list[dict]) -> dict:
            return {"count": len(users)}

        @private_expose
        def page(self, page: int = 1) -> int:
            return page
"""

import copy
import inspect
from collections.abc import Callable, Iterator, Mapping
from graphlib import CycleError, TopologicalSorter
from typing import Any

from vista.errors import ExposureError

# Options consumed by the exposure itself; the rest are decoration options
EXPOSURE_OPTIONS = frozenset({"private", "default", "decorate"})

# Marker attribute set on functions collected from a controller class body
EXPOSURE_MARKER = "__vista_exposure__"


class Exposure:
    """A single named exposure.

    Attributes:
        name: Local name produced by this exposure
        func: Computation (None passes the input value through)
        options: Exposure and decoration options
        bound_to: Object the function is bound to (set by bind())
    """

    def __init__(
        self,
        name: str,
        func: Callable[..., Any] | None = None,
        method: bool = False,
        bound_to: Any = None,
        **options: Any,
    ) -> None:
        self.name = name
        self.func = func
        self.method = method
        self.bound_to = bound_to
        self.options = options

    @property
    def private(self) -> bool:
        return bool(self.options.get("private", False))

    @property
    def decorate(self) -> bool:
        return bool(self.options.get("decorate", True))

    @property
    def default(self) -> Any:
        return self.options.get("default")

    @property
    def decoration_options(self) -> dict[str, Any]:
        """Options forwarded to the decorator."""
        return {k: v for k, v in self.options.items() if k not in EXPOSURE_OPTIONS}

    def bind(self, obj: Any) -> "Exposure":
        """Return a copy whose method-style function is bound to obj."""
        return Exposure(self.name, self.func, self.method, obj, **self.options)

    @property
    def target(self) -> Callable[..., Any] | None:
        if self.func is None:
            return None
        if self.method:
            if self.bound_to is None:
                raise ExposureError(f"Exposure {self.name!r} must be bound before use")
            # Looked up by name; subclass overrides of the method apply
            return getattr(self.bound_to, self.name)
        return self.func

    def parameters(self) -> list[inspect.Parameter]:
        func = self.target
        if func is None:
            return []
        return list(inspect.signature(func).parameters.values())

    def dependency_names(self, exposure_names: set[str]) -> list[str]:
        """Names of other exposures this exposure reads."""
        return [
            param.name
            for param in self.parameters()
            if param.name in exposure_names
            and param.name != self.name
            and param.kind not in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
        ]

    def __call__(self, input: Mapping[str, Any], locals: Mapping[str, Any]) -> Any:
        """Compute this exposure's value.

        Args:
            input: Controller input
            locals: Values of exposures computed so far

        Returns:
            Exposure value

        Raises:
            ExposureError: If a required parameter has no value
        """
        func = self.target
        if func is None:
            return input.get(self.name, self.default)

        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for param in self.parameters():
            if param.kind == param.VAR_KEYWORD:
                kwargs.update({k: v for k, v in input.items() if k not in kwargs})
                continue
            if param.kind == param.VAR_POSITIONAL:
                continue

            if param.name in locals and param.name != self.name:
                value = locals[param.name]
            elif param.name in input:
                value = input[param.name]
            elif param.default is not param.empty:
                continue
            else:
                raise ExposureError(
                    f"Exposure {self.name!r} requires {param.name!r}, "
                    "which is neither an exposure nor part of the input"
                )

            if param.kind == param.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[param.name] = value

        return func(*args, **kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Exposure):
            return NotImplemented
        return (self.name, self.func, self.options) == (other.name, other.func, other.options)

    def __repr__(self) -> str:
        return f"Exposure({self.name!r}, private={self.private})"


class Exposures:
    """Registry of exposures for one controller class.

    Registries are never shared between classes: a subclass receives a
    copy of its parent's registry when it is defined, and the two evolve
    independently from then on.
    """

    def __init__(self, exposures: dict[str, Exposure] | None = None) -> None:
        self._exposures: dict[str, Exposure] = dict(exposures or {})

    def add(self, name: str, func: Callable[..., Any] | None = None, **options: Any) -> None:
        """Register (or replace) an exposure.

        Args:
            name: Local name
            func: Computation, or None to pass input through
            **options: private, default, decorate and decoration options
        """
        method = bool(options.pop("method", False))
        self._exposures[name] = Exposure(name, func, method, **options)

    def import_(self, name: str, exposure: Exposure) -> None:
        """Register a copy of an existing exposure."""
        self._exposures[name] = copy.deepcopy(exposure)

    def copy(self) -> "Exposures":
        """Return an independent copy of this registry."""
        registry = Exposures()
        for name, exposure in self._exposures.items():
            registry.import_(name, exposure)
        return registry

    def bind(self, obj: Any) -> "Exposures":
        """Return a registry whose method exposures are bound to obj."""
        return Exposures({name: e.bind(obj) for name, e in self._exposures.items()})

    def __contains__(self, name: object) -> bool:
        return name in self._exposures

    def __getitem__(self, name: str) -> Exposure:
        return self._exposures[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._exposures)

    def __len__(self) -> int:
        return len(self._exposures)

    def _ordered_names(self) -> list[str]:
        names = set(self._exposures)
        graph = {
            name: exposure.dependency_names(names)
            for name, exposure in self._exposures.items()
        }
        try:
            return list(TopologicalSorter(graph).static_order())
        except CycleError as e:
            raise ExposureError(f"Circular exposure dependencies: {e.args[1]}") from e

    def locals(self, input: Mapping[str, Any]) -> dict[str, Any]:
        """Resolve all exposures against input.

        Args:
            input: Controller input

        Returns:
            Public locals (private exposures are computed but left out)
        """
        computed: dict[str, Any] = {}
        for name in self._ordered_names():
            computed[name] = self._exposures[name](input, computed)

        return {
            name: computed[name]
            for name, exposure in self._exposures.items()
            if not exposure.private
        }


def expose(func: Callable[..., Any] | None = None, /, **options: Any) -> Any:
    """Mark a controller method as an exposure.

    Usable bare (``@expose``) or with options (``@expose(as_=UserPart)``).
    """

    def mark(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, EXPOSURE_MARKER, options)
        return func

    if func is not None:
        return mark(func)
    return mark


def private_expose(func: Callable[..., Any] | None = None, /, **options: Any) -> Any:
    """Mark a controller method as a private exposure."""
    return expose(func, private=True, **options)
