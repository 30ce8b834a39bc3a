"""Vista - view rendering with decorated parts and layouts.

Vista turns raw data into template locals, wraps those locals in part
objects that decorate attributes lazily, and renders them through Jinja2
templates, optionally inside a layout.

Building blocks:
- Controller: resolves exposures into locals and renders template + layout
- Part: decorating wrapper around one value, with partial rendering
- Scope: immutable (locals, context) pair for one render
- Context: per-render helpers, rebound to the active renderer
- Decorator: wraps values (and collections of values) in parts
"""

from vista.context import Context
from vista.controller import Controller
from vista.decorator import Decorator
from vista.errors import (
    ConfigurationError,
    ExposureError,
    TemplateNotFoundError,
    UndefinedTemplateError,
    UnsupportedMemberAccess,
    ViewError,
)
from vista.exposures import Exposure, Exposures, expose, private_expose
from vista.part import Part
from vista.scope import Scope

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Context",
    "Controller",
    "Decorator",
    "Exposure",
    "ExposureError",
    "Exposures",
    "Part",
    "Scope",
    "TemplateNotFoundError",
    "UndefinedTemplateError",
    "UnsupportedMemberAccess",
    "ViewError",
    "expose",
    "private_expose",
]
