# folio/markdown/preprocessors/variables.py
"""
Placeholder substitution.

Two independent passes exist:

- ``$name`` placeholders are filled from the document's own front matter.
- ``{{key}}`` placeholders are filled from attributes supplied by whatever
  hosts the compiled document.

Both are single-pass: a substituted value is never scanned again, and an
unknown placeholder is left exactly as written.
"""

import json
import re
from typing import Any, Mapping, Optional

VARIABLE_PATTERN = re.compile(r"\$([A-Za-z_][A-Za-z0-9_-]*)")
HOST_ATTRIBUTE_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


def stringify(value: Any) -> str:
    """Render a metadata value the way it should appear in body text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def substitute_variables(text: str, metadata: Optional[Mapping[str, Any]]) -> str:
    """Replace ``$name`` with ``metadata[name]`` where the key exists."""
    if not metadata:
        return text

    def replace(match):
        name = match.group(1)
        if name not in metadata:
            return match.group(0)
        return stringify(metadata[name])

    return VARIABLE_PATTERN.sub(replace, text)


def substitute_host_attributes(
    text: str, attributes: Optional[Mapping[str, Any]]
) -> str:
    """Replace ``{{key}}`` with ``attributes[key]`` where the key exists."""
    if not attributes:
        return text

    def replace(match):
        key = match.group(1).strip()
        if key not in attributes:
            return match.group(0)
        return stringify(attributes[key])

    return HOST_ATTRIBUTE_PATTERN.sub(replace, text)
