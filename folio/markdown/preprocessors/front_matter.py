# folio/markdown/preprocessors/front_matter.py
"""
Split a leading YAML metadata block from a document.

    ---
    title: Demo
    author: Someone
    ---
    Body text starts here.

The block must start at offset 0. Its contents are decoded with
``yaml.safe_load``; anything that does not decode to a mapping is
reported and treated as missing metadata.
"""

import logging
import re

import yaml

from ..exceptions import MetadataDecodeError

logger = logging.getLogger(__name__)

FRONT_MATTER_PATTERN = re.compile(r"\A---\n(.*?)\n---", re.DOTALL)


def decode_metadata(source: str) -> dict:
    """
    Decode the text of a front-matter block.

    Raises:
        MetadataDecodeError: if the YAML is invalid or is not a mapping
    """
    try:
        value = yaml.safe_load(source)
    except yaml.YAMLError as exc:
        raise MetadataDecodeError(str(exc)) from exc

    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MetadataDecodeError(
            f"expected a mapping, got {type(value).__name__}"
        )
    return value


def extract_front_matter(text: str):
    """
    Return the decoded front matter of ``text``.

    Returns:
        ``{}`` when there is no front-matter block, ``None`` when the block
        could not be decoded, otherwise the decoded mapping.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return {}
    try:
        return decode_metadata(match.group(1))
    except MetadataDecodeError as exc:
        logger.warning(f"Failed to parse YAML front matter: {exc}")
        return None


def remove_front_matter(text: str) -> str:
    """Strip the front-matter block (decodable or not) and trim the rest."""
    return FRONT_MATTER_PATTERN.sub("", text, count=1).strip()


def split_front_matter(text: str):
    """Return ``(metadata, body)`` for ``text``."""
    return extract_front_matter(text), remove_front_matter(text)
