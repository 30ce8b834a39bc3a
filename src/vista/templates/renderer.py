"""Jinja2 renderer for view templates and partials.

Template files are named ``<name>.<format>.<ext>`` (e.g. ``users.html.j2``)
and resolved through the renderer's view paths. Each render sees the
scope's locals by name plus:

- ``context``: the render-scoped Context
- ``render(partial, **locals)``: render a partial sharing the context
- ``caller()``: the injected block (only when one was supplied), e.g. the
  already-rendered template inside a layout
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from vista.errors import TemplateNotFoundError
from vista.scope import Scope
from vista.templates.path import ViewPath

logger = logging.getLogger(__name__)

PARTIAL_PREFIX = "_"
PATH_DELIMITER = "/"

# Formats rendered with HTML autoescaping
AUTOESCAPE_FORMATS = frozenset({"html", "htm", "xml", "xhtml"})


def name_for_partial(name: str) -> str:
    """Prefix the last segment of a partial name with an underscore.

    Examples:
        >>> name_for_partial("users/row")
        'users/_row'
    """
    *segments, last = name.split(PATH_DELIMITER)
    return PATH_DELIMITER.join([*segments, f"{PARTIAL_PREFIX}{last}"])


class Renderer:
    """Renders templates from a list of view paths for one format.

    Renderers are cheap to duplicate: chdir() copies share the Jinja2
    environment, and two renderers built from the same paths and format
    behave identically.

    Usage:
        renderer = Renderer([ViewPath("views")], format="html")
        html = renderer.template("users", Scope(locals={"users": users}))
    """

    def __init__(
        self,
        paths: Sequence[ViewPath],
        format: str = "html",
        environment: Environment | None = None,
        **engine_options: Any,
    ) -> None:
        """Initialize the renderer.

        Args:
            paths: Ordered view paths (earlier paths win)
            format: Output format
            environment: Jinja2 environment to share (built when None)
            **engine_options: Jinja2 Environment options
        """
        self.paths = list(paths)
        self.format = format
        self.engine_options = engine_options
        self._environment = environment or self._build_environment()

    def _build_environment(self) -> Environment:
        roots: list[str] = []
        for path in self.paths:
            if str(path.root) not in roots:
                roots.append(str(path.root))

        options: dict[str, Any] = {
            "autoescape": self.format in AUTOESCAPE_FORMATS,
            "keep_trailing_newline": False,
        }
        options.update(self.engine_options)

        logger.debug("Building %s environment for roots: %s", self.format, roots)
        return Environment(loader=FileSystemLoader(roots), **options)

    @property
    def environment(self) -> Environment:
        return self._environment

    def lookup(self, name: str) -> str | None:
        """Resolve a template name to a root-relative file name.

        Returns:
            First match across the view paths, or None
        """
        for path in self.paths:
            result = path.lookup(name, self.format)
            if result:
                return result
        return None

    def template(
        self,
        name: str,
        scope: Scope,
        block: Callable[..., Any] | None = None,
    ) -> Any:
        """Render a template.

        Args:
            name: Template name (without extensions)
            scope: Locals and context for the render
            block: Optional callable the template can embed via caller()

        Returns:
            Rendered content (Markup when autoescaping applies)

        Raises:
            TemplateNotFoundError: If no view path holds the template
        """
        path = self.lookup(name)
        if path is None:
            raise TemplateNotFoundError(name, self.format, [str(p) for p in self.paths])

        return self._render(path, scope, block)

    def partial(
        self,
        name: str,
        scope: Scope,
        block: Callable[..., Any] | None = None,
    ) -> Any:
        """Render a partial (the last name segment gains a ``_`` prefix)."""
        return self.template(name_for_partial(name), scope, block)

    def chdir(self, dirname: str) -> "Renderer":
        """Return a renderer whose view paths are rebound into dirname."""
        return Renderer(
            [path.chdir(dirname) for path in self.paths],
            format=self.format,
            environment=self._environment,
            **self.engine_options,
        )

    def _render(
        self,
        path: str,
        scope: Scope,
        block: Callable[..., Any] | None,
    ) -> Any:
        template = self._environment.get_template(path)

        namespace: dict[str, Any] = {
            "context": scope.context,
            "render": scope.render,
        }
        namespace.update(scope.locals)
        if block is not None:
            namespace["caller"] = _safe_block(block)

        output = template.render(namespace)
        logger.debug("Rendered %s (%d characters)", path, len(output))

        if self._environment.autoescape is True:
            return Markup(output)
        return output

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Renderer):
            return NotImplemented
        return (self.paths, self.format) == (other.paths, other.format)

    def __hash__(self) -> int:
        return hash((tuple(self.paths), self.format))

    def __repr__(self) -> str:
        return f"Renderer(paths={[str(p) for p in self.paths]!r}, format={self.format!r})"


def _safe_block(block: Callable[..., Any]) -> Callable[..., Markup]:
    """Wrap a block so its output embeds without being escaped again."""

    def caller(*args: Any, **kwargs: Any) -> Markup:
        return Markup(block(*args, **kwargs))

    return caller
