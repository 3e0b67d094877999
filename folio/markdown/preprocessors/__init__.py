# folio/markdown/preprocessors/__init__.py

from .figure_caption import figure_caption_default
from .front_matter import split_front_matter
from .variables import substitute_host_attributes, substitute_variables

PREPROCESSORS = [
    figure_caption_default,  # Fence-aware ![[img]] + caption -> <figure>
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text


__all__ = (
    "PREPROCESSORS",
    "apply_preprocessors",
    "split_front_matter",
    "substitute_host_attributes",
    "substitute_variables",
)
