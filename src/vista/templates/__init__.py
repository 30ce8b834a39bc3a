"""Vista template rendering.

This module provides the Jinja2 renderer and the multi-root view path
lookup it renders from.
"""

from vista.templates.path import ViewPath
from vista.templates.renderer import Renderer, name_for_partial

__all__ = ["Renderer", "ViewPath", "name_for_partial"]
