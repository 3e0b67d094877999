import logging

import pytest

from folio.markdown.exceptions import FenceMiniLanguageDecodeError
from folio.markdown.extensions.chart_blocks import chart_to_html, parse_chart_config
from folio.markdown.renderer import compile_document


class TestChartToHtml:
    def test_attributes_in_fixed_order(self):
        html = chart_to_html({"height": 200, "type": "line", "line-width": 2})
        assert html == '<dataroom-chart type="line" height="200" line-width="2"></dataroom-chart>\n'

    def test_data_is_compact_json_content(self):
        html = chart_to_html({"type": "bar", "data": [{"label": "A", "value": 3}]})
        assert '>[{"label":"A","value":3}]</dataroom-chart>' in html

    def test_boolean_attributes(self):
        html = chart_to_html({"monochrome": False, "labels": True})
        assert 'monochrome="false"' in html
        assert 'labels="true"' in html

    def test_unknown_keys_are_ignored(self):
        assert chart_to_html({"flavour": "mint"}) == "<dataroom-chart></dataroom-chart>\n"


class TestParseChartConfig:
    def test_invalid_yaml_raises(self):
        with pytest.raises(FenceMiniLanguageDecodeError):
            parse_chart_config("type: [bar")

    def test_scalar_raises(self):
        with pytest.raises(FenceMiniLanguageDecodeError):
            parse_chart_config("just words")


class TestChartFences:
    def test_chart_fence_renders_element(self):
        html = compile_document("```chart\ntype: bar\nwidth: 400\ndata: [1, 2, 3]\n```").html
        assert '<dataroom-chart type="bar" width="400">[1,2,3]</dataroom-chart>' in html
        assert "<pre>" not in html

    def test_undecodable_chart_falls_back_to_code(self, caplog):
        with caplog.at_level(logging.WARNING):
            html = compile_document("```chart\ntype: [bar\n```").html
        assert '<pre><code class="language-chart">type: [bar\n</code></pre>' in html
        assert "chart" in caplog.text

    def test_other_fences_render_as_code(self):
        html = compile_document("```python\nprint(1)\n```").html
        assert '<code class="language-python">' in html

    def test_mermaid_fence(self):
        html = compile_document("```mermaid\ngraph TD\nA-->B\n```").html
        assert '<div class="mermaid">graph TD\nA--&gt;B\n</div>' in html
