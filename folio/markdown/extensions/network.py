# folio/markdown/extensions/network.py
"""
Network diagram fences.

A ``network`` fence holds three sections separated by ``---`` lines:

    ```network
    ---
    layout: force
    ---
    Server
        # Web server
        Handles requests.
    Database
        Stores everything.
    Replication Edge
        Nightly copy.
    ---
    (Server|color:blue) -[queries]-> (Database)
    (Database) <-- (Backup|shape:box)
    ```

Front matter (optional) is ``key: value`` per line. Definitions start with
an un-indented name; indented lines below it are a small Markdown subset
(ATX headings and paragraphs). Names containing "edge" are edges, all
others are nodes. Connections reference items in parentheses, may carry
``|key:value;key:value`` attributes, and are joined by ``-->``, ``<--``,
``-[label]->`` or ``<-[label]-``.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import FenceMiniLanguageDecodeError

SECTION_DELIMITER = "---"

FRONT_MATTER_LINE = re.compile(r"^([\w-]+):\s*(.+)$")
HEADING_LINE = re.compile(r"^(#{1,6})\s*(.+)$")
NODE_REFERENCE = re.compile(r"\(([^|)]+)(?:\|([^)]*))?\)")
OPERATOR = re.compile(r"^<?-(?:\[([^\]]+)\])?-?>?$")


@dataclass
class DiagramItem:
    name: str
    content: str
    rendered_content: str = ""

    @property
    def is_edge(self) -> bool:
        return "edge" in self.name.lower()


@dataclass
class DiagramEdge:
    source: str
    target: str
    label: Optional[str]
    direction: str  # "forward" or "backward"


@dataclass
class DiagramBlock:
    front_matter: dict[str, str] = field(default_factory=dict)
    items: list[DiagramItem] = field(default_factory=list)
    connections: list[str] = field(default_factory=list)

    @property
    def nodes(self) -> list[DiagramItem]:
        return [item for item in self.items if not item.is_edge]

    @property
    def edges(self) -> list[DiagramItem]:
        return [item for item in self.items if item.is_edge]

    @property
    def node_attributes(self) -> dict[str, dict[str, str]]:
        return parse_connection_attributes(self.connections)

    @property
    def resolved_edges(self) -> list[DiagramEdge]:
        return parse_connection_edges(self.connections)


def render_item_markdown(content: str) -> str:
    """Render the heading/paragraph subset used inside definitions."""
    parts: list[str] = []
    paragraph: list[str] = []

    def flush():
        if paragraph:
            parts.append(f"<p>{html.escape(' '.join(paragraph), quote=False)}</p>")
            paragraph.clear()

    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith("#"):
            flush()
            match = HEADING_LINE.match(stripped)
            if match:
                level = len(match.group(1))
                parts.append(
                    f"<h{level}>{html.escape(match.group(2), quote=False)}</h{level}>"
                )
        elif stripped:
            paragraph.append(stripped)
        else:
            flush()
    flush()

    return "\n".join(parts)


def parse_network_block(source: str) -> DiagramBlock:
    """
    Split a network fence body into its three sections.

    Raises:
        FenceMiniLanguageDecodeError: if the block defines nothing at all
    """
    lines = source.split("\n")
    block = DiagramBlock()

    first = next((line for line in lines if line.strip()), "")
    section = None if first.strip() == SECTION_DELIMITER else "definitions"

    current_name: Optional[str] = None
    current_lines: list[str] = []

    def save():
        if current_name:
            content = "\n".join(current_lines)
            block.items.append(
                DiagramItem(current_name, content, render_item_markdown(content))
            )

    for line in lines:
        if line.strip() == SECTION_DELIMITER:
            if section is None:
                section = "front_matter"
                continue
            if section == "front_matter":
                section = "definitions"
                continue
            if section == "definitions":
                section = "connections"
                continue

        if section == "front_matter":
            match = FRONT_MATTER_LINE.match(line.strip())
            if match:
                block.front_matter[match.group(1)] = match.group(2).strip()
        elif section == "definitions":
            if line and not line[0].isspace():
                save()
                current_name = line.replace(":", "", 1).strip()
                current_lines = []
            elif line.strip():
                current_lines.append(line[1:] if line.startswith("\t") else line)
        elif section == "connections":
            if line.strip():
                block.connections.append(line.strip())

    save()

    if not block.items and not block.connections:
        raise FenceMiniLanguageDecodeError("network", "no definitions or connections")
    return block


def _parse_attributes(raw: Optional[str]) -> dict[str, str]:
    attributes: dict[str, str] = {}
    if not raw:
        return attributes
    for pair in raw.split(";"):
        if ":" not in pair:
            continue
        key, value = (part.strip() for part in pair.split(":", 1))
        if key and value:
            attributes[key] = value
    return attributes


def parse_connection_attributes(connections: list[str]) -> dict[str, dict[str, str]]:
    """Merge ``(Name|key:value)`` attributes per node; later values win."""
    node_attributes: dict[str, dict[str, str]] = {}
    for connection in connections:
        for match in NODE_REFERENCE.finditer(connection):
            attributes = _parse_attributes(match.group(2))
            if attributes:
                node_attributes.setdefault(match.group(1).strip(), {}).update(attributes)
    return node_attributes


def parse_connection_edges(connections: list[str]) -> list[DiagramEdge]:
    """
    Resolve edges between consecutive node references.

    ``source``/``target`` always follow the arrow, so ``(A) <-- (B)`` is an
    edge from B to A.
    """
    edges: list[DiagramEdge] = []
    for connection in connections:
        references = list(NODE_REFERENCE.finditer(connection))
        for left, right in zip(references, references[1:]):
            operator = connection[left.end() : right.start()].strip()
            match = OPERATOR.match(operator)
            if not match:
                continue
            label = match.group(1).strip() if match.group(1) else None
            first, second = left.group(1).strip(), right.group(1).strip()
            if operator.startswith("<"):
                edges.append(DiagramEdge(second, first, label, "backward"))
            else:
                edges.append(DiagramEdge(first, second, label, "forward"))
    return edges


def _attribute(key: str, value) -> str:
    return f' {key}="{html.escape(str(value))}"'


def network_to_html(block: DiagramBlock) -> str:
    attributes = "".join(_attribute(k, v) for k, v in block.front_matter.items())
    parts = [f"<network-visualization{attributes}>"]

    node_attributes = block.node_attributes
    for index, node in enumerate(block.nodes):
        extra = "".join(
            _attribute(k, v) for k, v in node_attributes.get(node.name, {}).items()
        )
        parts.append(f'<network-node id="{index}"{_attribute("name", node.name)}{extra}>')
        if node.rendered_content:
            parts.append(node.rendered_content)
        parts.append("</network-node>")

    for edge in block.edges:
        parts.append(f"<network-edge{_attribute('name', edge.name)}>")
        if edge.rendered_content:
            parts.append(edge.rendered_content)
        parts.append("</network-edge>")

    for edge in block.resolved_edges:
        label = _attribute("label", edge.label) if edge.label else ""
        parts.append(
            f"<network-edge{_attribute('source', edge.source)}"
            f"{_attribute('target', edge.target)}{label}></network-edge>"
        )

    parts.append("</network-visualization>")
    return "\n".join(parts) + "\n"


def render_network(source: str) -> str:
    """Decode a network fence body and render it; raises on bad input."""
    return network_to_html(parse_network_block(source))
