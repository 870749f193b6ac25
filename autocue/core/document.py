"""Rekordbox XML <-> in-memory node tree, keeping Rekordbox's tag layout on write-back.

The generic part is plain ElementTree parsing and a line-per-element writer.
The Rekordbox-specific part is the collapse rules: POSITION_MARK and TEMPO are
always self-closing, while TRACK, NODE and the container tags are always
written as open/close pairs even when empty.
"""
import codecs
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from autocue.core.errors import ParseError

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
DEFAULT_INDENT = "  "

ALWAYS_COLLAPSED = frozenset({"POSITION_MARK", "TEMPO"})
NEVER_COLLAPSED = frozenset({"TRACK", "DJ_PLAYLISTS", "COLLECTION", "PLAYLISTS", "NODE"})

# First start tag that is not a declaration, processing instruction, comment or doctype
_ROOT_START = re.compile(r"<(?![?!])")
_FIRST_INDENT = re.compile(r"^([ \t]+)<", re.MULTILINE)
_ENCODING_DECL = re.compile(r"\s*<\?xml[^>]*?encoding\s*=\s*[\"']([A-Za-z][A-Za-z0-9._-]*)[\"']")
_SKIPPED_MARKUP = re.compile(r"<!--.*?-->|<!\[CDATA\[.*?\]\]>", re.DOTALL)
_START_TAG = re.compile(
    r"<([^\s/>!?]+)((?:\s+[^\s=/>]+\s*=\s*(?:\"[^\"]*\"|'[^']*'))*)\s*/?>"
)
_ATTR = re.compile(r"([^\s=/>]+)\s*=\s*(\"[^\"]*\"|'[^']*')")

_ATTR_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
    ("\n", "&#10;"),
    ("\r", "&#13;"),
    ("\t", "&#9;"),
)


@dataclass
class Node:
    """One element: tag, ordered attributes, ordered children, optional leaf text."""
    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)
    text: Optional[str] = None
    # attribute name -> (value as parsed, value as spelled in the source, quotes included)
    source: Dict[str, Tuple[str, str]] = field(default_factory=dict, repr=False, compare=False)

    def find(self, tag: str) -> Optional["Node"]:
        """First direct child with this tag, or None."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def findall(self, tag: str) -> List["Node"]:
        """All direct children with this tag, in document order (possibly empty)."""
        return [child for child in self.children if child.tag == tag]

    def append(self, child: "Node") -> "Node":
        self.children.append(child)
        return child

    def replace_children(self, tag: str, nodes: List["Node"]) -> None:
        """Replace all children with `tag` by `nodes`, placed where the first one was.

        Used to re-order a track's POSITION_MARK entries without disturbing
        sibling TEMPO entries. Appends when no child with `tag` exists.
        """
        result: List[Node] = []
        placed = False
        for child in self.children:
            if child.tag != tag:
                result.append(child)
            elif not placed:
                result.extend(nodes)
                placed = True
        if not placed:
            result.extend(nodes)
        self.children = result


@dataclass
class Document:
    """Parsed collection: root node plus the layout details needed to write it back."""
    root: Node
    prolog: str = XML_DECLARATION
    indent: str = DEFAULT_INDENT
    trailing: str = "\n"
    newline: str = "\n"
    encoding: str = "utf-8"


def parse(content: Union[str, bytes]) -> Document:
    """Parse XML text into a Document. Raises ParseError on malformed markup.

    Bytes are decoded with the encoding named in the XML declaration
    (UTF-8 when there is none).
    """
    if isinstance(content, bytes):
        content = _decode(content)
    content = content.lstrip("\ufeff")
    try:
        element = ET.fromstring(content)
    except ET.ParseError as e:
        raise ParseError(f"Error parsing XML: {e}") from e

    match = _ROOT_START.search(content)
    prolog = content[: match.start()] if match else ""
    indent_match = _FIRST_INDENT.search(content)
    stripped = content.rstrip()
    root = _from_element(element)
    _record_spelling(root, content)
    return Document(
        root=root,
        prolog=prolog,
        indent=indent_match.group(1) if indent_match else DEFAULT_INDENT,
        trailing=content[len(stripped):],
        newline="\r\n" if "\r\n" in content else "\n",
        encoding=_declared_encoding(content),
    )


def _declared_encoding(text: str) -> str:
    match = _ENCODING_DECL.match(text)
    return match.group(1) if match else "utf-8"


def _decode(data: bytes) -> str:
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8):]
    # The declaration is ASCII in every encoding Rekordbox or this module reads
    encoding = _declared_encoding(data[:256].decode("ascii", errors="replace"))
    try:
        return data.decode(encoding)
    except (LookupError, UnicodeDecodeError) as e:
        raise ParseError(f"Error parsing XML: {e}") from e


def _walk(node: Node) -> Iterator[Node]:
    yield node
    for child in node.children:
        yield from _walk(child)


def _record_spelling(root: Node, content: str) -> None:
    """Keep each attribute's source spelling so unchanged values are written back verbatim.

    Start tags are matched to nodes in document order; on any mismatch
    nothing is recorded and values are written in canonical form.
    """
    markup = _SKIPPED_MARKUP.sub("", content)
    nodes = list(_walk(root))
    tags = list(_START_TAG.finditer(markup))
    if len(tags) != len(nodes):
        return
    if any(node.tag != tag.group(1) for node, tag in zip(nodes, tags)):
        return
    for node, tag in zip(nodes, tags):
        for name, raw in _ATTR.findall(tag.group(2)):
            if name in node.attrs:
                node.source[name] = (node.attrs[name], raw)


def _from_element(element: ET.Element) -> Node:
    node = Node(tag=element.tag, attrs=dict(element.attrib))
    if len(element) == 0:
        if element.text and element.text.strip():
            node.text = element.text
        return node
    node.children = [_from_element(child) for child in element]
    return node


def build(document: Document) -> str:
    """Serialize a Document. Pure: same tree in, same text out."""
    lines: List[str] = []
    _render(document.root, 0, document.indent, lines)
    prolog = document.prolog
    if not prolog.lstrip().startswith("<?xml"):
        prolog = XML_DECLARATION + prolog
    return prolog + document.newline.join(lines) + document.trailing


def _collapses(tag: str) -> bool:
    if tag in ALWAYS_COLLAPSED:
        return True
    return tag not in NEVER_COLLAPSED


def _render(node: Node, depth: int, indent: str, lines: List[str]) -> None:
    pad = indent * depth
    start = f"<{node.tag}{_format_attrs(node)}"
    if node.children:
        lines.append(f"{pad}{start}>")
        for child in node.children:
            _render(child, depth + 1, indent, lines)
        lines.append(f"{pad}</{node.tag}>")
    elif node.text is not None:
        lines.append(f"{pad}{start}>{_escape_text(node.text)}</{node.tag}>")
    elif _collapses(node.tag):
        lines.append(f"{pad}{start}/>")
    else:
        lines.append(f"{pad}{start}></{node.tag}>")


def _format_attrs(node: Node) -> str:
    parts = []
    for name, value in node.attrs.items():
        spelled = node.source.get(name)
        if spelled is not None and spelled[0] == value:
            parts.append(f" {name}={spelled[1]}")
        else:
            parts.append(f' {name}="{_escape_attr(str(value))}"')
    return "".join(parts)


def _escape_attr(value: str) -> str:
    for raw, escaped in _ATTR_ESCAPES:
        value = value.replace(raw, escaped)
    return value


def _escape_text(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
