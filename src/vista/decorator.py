"""Default decoration rules: wrap values handed to templates in parts."""

import logging
import re
from typing import Any

from vista.part import Part

logger = logging.getLogger(__name__)

# Ordered (pattern, replacement) rules; the first match wins
SINGULAR_RULES: list[tuple[str, str]] = [
    (r"(?i)(quiz)zes$", r"\1"),
    (r"(?i)([^aeiouy]|qu)ies$", r"\1y"),
    (r"(?i)(ss)$", r"\1"),
    (r"(?i)(x|ch|ss|sh)es$", r"\1"),
    (r"(?i)(alias|status)(es)?$", r"\1"),
    (r"(?i)s$", ""),
]


def singularize(word: str) -> str:
    """Return the singular form of a collection name.

    Examples:
        >>> singularize("users")
        'user'
        >>> singularize("categories")
        'category'
        >>> singularize("boxes")
        'box'
    """
    for pattern, replacement in SINGULAR_RULES:
        if re.search(pattern, word):
            return re.sub(pattern, replacement, word)
    return word


class Decorator:
    """Turns raw values into parts.

    Rules:
        - ``as_`` selects the part class (default: Part)
        - list and tuple values become a part whose value is a list of
          element parts, each named by the singular of the collection name
          and built from ``each_as`` (default: Part)
        - everything else becomes a single part
    """

    def __call__(
        self,
        name: str,
        value: Any,
        context: Any,
        as_: type[Part] | None = None,
        each_as: type[Part] | None = None,
        **options: Any,
    ) -> Any:
        """Decorate a value.

        Args:
            name: Local or attribute name
            value: Raw value (only truthy values reach the decorator)
            context: Render-scoped context handed to the part
            as_: Part class for the value
            each_as: Part class for elements of a collection value
            **options: Unrecognized exposure options (ignored)

        Returns:
            Part wrapping the value
        """
        klass = as_ or Part

        if isinstance(value, (list, tuple)):
            singular_name = singularize(name)
            elements = [
                self(singular_name, element, context, as_=each_as) if element else element
                for element in value
            ]
            logger.debug("Decorated collection %s (%d elements)", name, len(elements))
            return klass(name=name, value=elements, context=context)

        return klass(name=name, value=value, context=context)
