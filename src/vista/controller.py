"""View controller: resolves locals, decorates them, and renders templates.

Settings are class attributes, so subclasses inherit anything they do not
set themselves. Exposures are the exception: each subclass copies its
parent's exposures when it is defined, and the two registries evolve
independently afterwards.

Usage:
    class UsersView(Controller):
        paths = ["views"]
        layout = "app"
        template = "users"

        @expose
        def users(self, users=()):
            return users

    html = UsersView()(context=AppContext(), users=repo.all())
"""

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from vista.context import Context
from vista.decorator import Decorator
from vista.errors import ConfigurationError, UndefinedTemplateError
from vista.exposures import EXPOSURE_MARKER, Exposures
from vista.scope import EMPTY_LOCALS, Scope
from vista.templates import Renderer, ViewPath

if TYPE_CHECKING:
    from vista.config import ViewConfig

logger = logging.getLogger(__name__)

DEFAULT_LAYOUTS_DIR = "layouts"
DEFAULT_CONTEXT = Context()

SETTINGS = frozenset(
    {"paths", "layout", "template", "default_format", "context", "decorator", "engine_options"}
)

# One renderer per (controller class, format), filled on first use
_renderers: dict[tuple[type, str], Renderer] = {}
_renderers_lock = threading.Lock()


class Controller:
    """Base class for view controllers.

    Attributes:
        paths: View root directories, searched in order
        layout: Layout name under ``layouts/`` (None disables the layout)
        template: Template name (required to render)
        default_format: Format used when a call does not pass one
        context: Default context prototype
        decorator: Decorator turning locals into parts
        engine_options: Jinja2 Environment options
    """

    paths: ClassVar[list[str | Path]] = []
    layout: ClassVar[str | None] = None
    template: ClassVar[str | None] = None
    default_format: ClassVar[str] = "html"
    context: ClassVar[Context] = DEFAULT_CONTEXT
    decorator: ClassVar[Any] = Decorator()
    engine_options: ClassVar[dict[str, Any]] = {}

    exposures: Exposures = Exposures()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.exposures = cls.exposures.copy()

        for name, attr in list(vars(cls).items()):
            options = getattr(attr, EXPOSURE_MARKER, None)
            if options is not None:
                cls.exposures.add(name, attr, method=True, **options)

    # =========================================================================
    # Class-level configuration
    # =========================================================================

    @classmethod
    def configure(cls, config: "ViewConfig | None" = None, **settings: Any) -> None:
        """Apply settings to this controller class.

        Args:
            config: Loaded view configuration (unset fields are skipped)
            **settings: Individual settings, applied after config

        Raises:
            ConfigurationError: If a setting name is unknown
        """
        values = config.to_settings() if config is not None else {}
        values.update(settings)

        unknown = sorted(set(values) - SETTINGS)
        if unknown:
            raise ConfigurationError(f"Unknown controller settings: {unknown}")

        for name, value in values.items():
            setattr(cls, name, value)

        cls.reset_renderers()

    @classmethod
    def expose(cls, *names: str, func: Any = None, **options: Any) -> None:
        """Register exposures on this class at runtime.

        Args:
            *names: Local names (exactly one when func is given)
            func: Computation for the exposure; None passes input through
            **options: private, default, decorate and decoration options
        """
        if func is not None and len(names) != 1:
            raise ConfigurationError("expose() takes exactly one name when func is given")

        for name in names:
            cls.exposures.add(name, func, **options)

    @classmethod
    def private_expose(cls, *names: str, func: Any = None, **options: Any) -> None:
        """Register private exposures (computed, but not passed to templates)."""
        cls.expose(*names, func=func, private=True, **options)

    @classmethod
    def view_paths(cls) -> list[ViewPath]:
        paths = cls.paths
        if isinstance(paths, (str, Path)):
            paths = [paths]
        return [ViewPath(path) for path in paths]

    @classmethod
    def renderer(cls, format: str | None = None) -> Renderer:
        """Get the cached renderer for this class and format.

        Args:
            format: Output format (defaults to default_format)

        Returns:
            Renderer shared by every call on this class for the format
        """
        format = format or cls.default_format
        key = (cls, format)

        renderer = _renderers.get(key)
        if renderer is None:
            with _renderers_lock:
                renderer = _renderers.get(key)
                if renderer is None:
                    renderer = Renderer(cls.view_paths(), format=format, **cls.engine_options)
                    _renderers[key] = renderer
        return renderer

    @classmethod
    def reset_renderers(cls) -> None:
        """Drop cached renderers for this class and its subclasses."""
        with _renderers_lock:
            for key in [key for key in _renderers if issubclass(key[0], cls)]:
                del _renderers[key]

    # =========================================================================
    # Rendering
    # =========================================================================

    def __init__(self) -> None:
        self.layout_dir = DEFAULT_LAYOUTS_DIR
        self.exposures = type(self).exposures.bind(self)

    @property
    def template_path(self) -> str | None:
        return self.template

    @property
    def layout_path(self) -> str:
        return f"{self.layout_dir}/{self.layout}"

    def __call__(
        self,
        format: str | None = None,
        context: Context | None = None,
        locals: Mapping[str, Any] | None = None,
        **input: Any,
    ) -> Any:
        """Render the template, wrapped in the layout when one is set.

        Args:
            format: Output format (defaults to default_format)
            context: Context prototype (defaults to the configured context)
            locals: Locals that override exposure values of the same name
            **input: Input for the exposures

        Returns:
            Rendered content

        Raises:
            UndefinedTemplateError: If no template is configured
        """
        if not self.template_path:
            raise UndefinedTemplateError(f"no template configured for {type(self).__name__}")

        format = format or self.default_format
        if context is None:
            context = type(self).context

        renderer = type(self).renderer(format)
        logger.debug(
            "Rendering %s (template=%s, layout=%s, format=%s)",
            type(self).__name__,
            self.template_path,
            self.layout or "none",
            format,
        )

        template_content = renderer.template(
            self.template_path,
            self._template_scope(renderer, context, locals, input),
        )

        if not self.layout:
            return template_content

        return renderer.template(
            self.layout_path,
            self._layout_scope(renderer, context),
            lambda: template_content,
        )

    def locals(self, locals: Mapping[str, Any] | None = None, **input: Any) -> dict[str, Any]:
        """Resolve exposures against input and merge explicit locals on top.

        Args:
            locals: Locals that win over exposure values
            **input: Input for the exposures

        Returns:
            Undecorated locals
        """
        return {**self.exposures.locals(input), **(locals or {})}

    def _template_scope(
        self,
        renderer: Renderer,
        context: Context,
        locals: Mapping[str, Any] | None,
        input: Mapping[str, Any],
    ) -> Scope:
        return self._scope(
            renderer.chdir(self.template_path),
            context,
            self.locals(locals, **input),
        )

    def _layout_scope(self, renderer: Renderer, context: Context) -> Scope:
        return self._scope(renderer.chdir(self.layout_dir), context)

    def _scope(
        self,
        renderer: Renderer,
        context: Context,
        locals: Mapping[str, Any] = EMPTY_LOCALS,
    ) -> Scope:
        # The render-scoped context carries the rebound renderer, so parts
        # render partials relative to the template's own directory
        context = context.for_rendering(renderer, type(self).decorator)
        return Scope(locals=self._decorated_locals(context, locals), context=context)

    def _decorated_locals(self, context: Context, locals: Mapping[str, Any]) -> dict[str, Any]:
        decorator = type(self).decorator
        result: dict[str, Any] = {}

        for name, value in locals.items():
            # Decorate truthy values only
            if value:
                exposure = self.exposures[name] if name in self.exposures else None
                if exposure is None:
                    value = decorator(name, value, context)
                elif exposure.decorate:
                    value = decorator(name, value, context, **exposure.decoration_options)
            result[name] = value

        return result
