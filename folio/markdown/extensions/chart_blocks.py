# folio/markdown/extensions/chart_blocks.py
"""
Chart fences.

    ```chart
    type: bar
    width: 400
    monochrome: true
    data:
      - {label: A, value: 3}
      - {label: B, value: 5}
    ```

becomes

    <dataroom-chart type="bar" width="400" monochrome="true">[{"label":"A","value":3},...]</dataroom-chart>
"""

import html
import json

import yaml

from ..exceptions import FenceMiniLanguageDecodeError
from ..preprocessors.variables import stringify

CHART_ELEMENT = "dataroom-chart"

# Emitted in this order, whenever present
CHART_ATTRIBUTES = (
    "type",
    "width",
    "height",
    "orientation",
    "monochrome",
    "color",
    "line-width",
    "radius",
    "min-radius",
    "max-radius",
    "labels",
)


def parse_chart_config(source: str) -> dict:
    try:
        config = yaml.safe_load(source.strip())
    except yaml.YAMLError as exc:
        raise FenceMiniLanguageDecodeError("chart", str(exc)) from exc
    if not isinstance(config, dict):
        raise FenceMiniLanguageDecodeError(
            "chart", f"expected a mapping, got {type(config).__name__}"
        )
    return config


def chart_to_html(config: dict) -> str:
    attributes = [
        f'{key}="{html.escape(stringify(config[key]))}"'
        for key in CHART_ATTRIBUTES
        if config.get(key) is not None
    ]
    attribute_string = (" " + " ".join(attributes)) if attributes else ""

    content = ""
    if config.get("data") is not None:
        content = html.escape(
            json.dumps(config["data"], separators=(",", ":"), default=str),
            quote=False,
        )

    return f"<{CHART_ELEMENT}{attribute_string}>{content}</{CHART_ELEMENT}>\n"


def render_chart(source: str) -> str:
    """Decode a chart fence body and render it; raises on bad input."""
    return chart_to_html(parse_chart_config(source))
