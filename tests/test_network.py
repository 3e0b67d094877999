import pytest

from folio.markdown.exceptions import FenceMiniLanguageDecodeError
from folio.markdown.extensions.network import (
    DiagramEdge,
    network_to_html,
    parse_connection_attributes,
    parse_connection_edges,
    parse_network_block,
    render_item_markdown,
)
from folio.markdown.renderer import compile_document

NETWORK_SOURCE = """---
layout: force
---
Server
    # Web server
    Handles requests.
Database
    Stores rows.
Sync Edge
    Nightly copy.
---
(Server|color:blue) -[queries]-> (Database)
(Database) <-- (Backup|shape:box)
"""


class TestConnectionEdges:
    def test_backward_arrow_swaps_source_and_target(self):
        assert parse_connection_edges(["(A) <-- (B)"]) == [
            DiagramEdge(source="B", target="A", label=None, direction="backward")
        ]

    def test_labelled_forward_arrow(self):
        assert parse_connection_edges(["(A) -[Label]-> (B)"]) == [
            DiagramEdge(source="A", target="B", label="Label", direction="forward")
        ]

    def test_labelled_backward_arrow(self):
        assert parse_connection_edges(["(A) <-[reads]- (B)"]) == [
            DiagramEdge(source="B", target="A", label="reads", direction="backward")
        ]

    def test_attributes_do_not_leak_into_names(self):
        edges = parse_connection_edges(["(A|color:red) --> (B|size:2)"])
        assert (edges[0].source, edges[0].target) == ("A", "B")

    def test_chained_connections(self):
        edges = parse_connection_edges(["(A) --> (B) --> (C)"])
        assert [(e.source, e.target) for e in edges] == [("A", "B"), ("B", "C")]

    def test_free_text_between_references_is_not_an_edge(self):
        assert parse_connection_edges(["(A) and also (B)"]) == []


class TestConnectionAttributes:
    def test_later_values_override_earlier(self):
        attributes = parse_connection_attributes(
            ["(A|color:red;size:2) --> (B)", "(C) --> (A|color:blue)"]
        )
        assert attributes == {"A": {"color": "blue", "size": "2"}}

    def test_value_may_contain_colon(self):
        attributes = parse_connection_attributes(["(A|href:http://x.test) --> (B)"])
        assert attributes["A"]["href"] == "http://x.test"


class TestParseNetworkBlock:
    def test_sections(self):
        block = parse_network_block(NETWORK_SOURCE)
        assert block.front_matter == {"layout": "force"}
        assert [node.name for node in block.nodes] == ["Server", "Database"]
        assert [edge.name for edge in block.edges] == ["Sync Edge"]
        assert len(block.connections) == 2

    def test_front_matter_is_optional(self):
        block = parse_network_block("A\n    Alpha\nB\n---\n(A) --> (B)")
        assert block.front_matter == {}
        assert [item.name for item in block.items] == ["A", "B"]
        assert block.connections == ["(A) --> (B)"]

    def test_node_attributes_are_derived(self):
        block = parse_network_block(NETWORK_SOURCE)
        assert block.node_attributes == {
            "Server": {"color": "blue"},
            "Backup": {"shape": "box"},
        }

    def test_empty_block_raises(self):
        with pytest.raises(FenceMiniLanguageDecodeError):
            parse_network_block("\n\n")


class TestRenderItemMarkdown:
    def test_headings_and_paragraphs(self):
        assert render_item_markdown("# Title\nline one\nline two\n\npara") == (
            "<h1>Title</h1>\n<p>line one line two</p>\n<p>para</p>"
        )


class TestNetworkHtml:
    def test_elements(self):
        html = network_to_html(parse_network_block(NETWORK_SOURCE))
        assert html.startswith('<network-visualization layout="force">')
        assert '<network-node id="0" name="Server" color="blue">' in html
        assert "<h1>Web server</h1>" in html
        assert '<network-node id="1" name="Database">' in html
        assert '<network-edge name="Sync Edge">' in html
        assert (
            '<network-edge source="Server" target="Database" label="queries"></network-edge>'
            in html
        )
        assert '<network-edge source="Backup" target="Database"></network-edge>' in html

    def test_network_fence_in_document(self):
        html = compile_document(f"```network\n{NETWORK_SOURCE}```").html
        assert "<network-visualization" in html
        assert "<pre>" not in html

    def test_empty_network_fence_falls_back_to_code(self):
        html = compile_document("```network\n\n```").html
        assert '<code class="language-network">' in html
