"""Errors raised while resolving, decorating, and rendering views.

Every error derives from ViewError so callers can catch the whole family.
Errors raised by Jinja2 itself are never wrapped.
"""


class ViewError(Exception):
    """Base class for all Vista errors."""


class UndefinedTemplateError(ViewError):
    """Raised when a controller is called without a configured template."""


class TemplateNotFoundError(ViewError):
    """Raised when a template name does not resolve in any view path."""

    def __init__(self, name: str, format: str, paths: list[str]) -> None:
        self.name = name
        self.format = format
        self.paths = paths
        searched = "\n".join(f"- {path}" for path in paths)
        super().__init__(
            f"Template {name!r} ({format}) could not be found in paths:\n{searched}"
        )


class UnsupportedMemberAccess(ViewError, AttributeError):
    """Raised when a part cannot resolve a member.

    Subclasses AttributeError so hasattr() and Jinja2's attribute/item
    fallback keep working against parts.
    """

    def __init__(self, member: str, part_name: str) -> None:
        self.member = member
        self.part_name = part_name
        super().__init__(f"undefined member {member!r} for part {part_name!r}")


class ExposureError(ViewError):
    """Raised when exposures cannot be resolved into locals."""


class ConfigurationError(ViewError):
    """Raised when a controller or config file carries invalid settings."""
