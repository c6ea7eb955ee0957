"""SGF text to game trees.

``parse`` reads a whole collection. Syntax errors abort at once; tree-level
checks (every root needs ``SZ``) run on all trees and are reported together.
``parse_file`` adds encoding detection for files on disk.
"""

from __future__ import annotations

import logging
import re

import chardet

from sgfedit.common.lists import and_results
from sgfedit.common.typed_config import TypedConfigReader
from sgfedit.core.constants import DEFAULT_ENCODING, ENCODING_SNIFF_BYTES, PASS_AS_TT_COORD
from sgfedit.core.errors import SgfParseError
from sgfedit.core.game_node import Collection, Node
from sgfedit.core.properties import Property, property_info
from sgfedit.core.sgf_values import Scanner, read_values

logger = logging.getLogger(__name__)

_PASS_MOVES = ("B", "W")


class SgfParser:
    """Recursive-descent reader for the collection grammar.

    Collection := ws* (GameTree ws*)* EOF
    GameTree   := '(' ws* (Node ws*)+ (GameTree ws*)* ')'
    Node       := ';' ws* (Property ws*)*
    Property   := UcLetter+ ws* PropValue+
    """

    def __init__(self, text: str) -> None:
        self.scanner = Scanner(text)

    def parse_trees(self) -> list[Node]:
        s = self.scanner
        trees = []
        s.skip_whitespace()
        while not s.at_end:
            if s.peek() != "(":
                s.fail("game tree or end of input")
            trees.append(self._game_tree())
            s.skip_whitespace()
        return trees

    def _game_tree(self) -> Node:
        s = self.scanner
        s.expect("(", "game tree")
        s.skip_whitespace()
        if s.peek() != ";":
            s.fail("node")
        sequence = []
        while s.peek() == ";":
            sequence.append(self._node())
            s.skip_whitespace()
        subtrees = []
        while s.peek() == "(":
            subtrees.append(self._game_tree())
            s.skip_whitespace()
        s.expect(")", "node, game tree or ')'")
        # Fold the sequence into a chain, subtrees hang off the last node
        tree = sequence[-1].with_children(subtrees)
        for node in reversed(sequence[:-1]):
            tree = node.with_children((tree,))
        return tree

    def _node(self) -> Node:
        s = self.scanner
        s.expect(";", "node")
        s.skip_whitespace()
        properties: list[Property] = []
        seen: set[str] = set()
        while "A" <= s.peek() <= "Z":
            prop = self._property()
            if prop.name in seen:
                line, column = s.location()
                logger.warning("Duplicate property %s in node ending at line %d, column %d", prop.name, line, column)
            seen.add(prop.name)
            properties.append(prop)
            s.skip_whitespace()
        return Node(tuple(properties))

    def _property(self) -> Property:
        s = self.scanner
        start = s.pos
        while "A" <= s.peek() <= "Z":
            s.advance()
        name = s.text[start : s.pos]
        s.skip_whitespace()
        return Property(name, read_values(s, property_info(name).value_type))


def _normalize_passes(root: Node, width: int, height: int, max_size: int) -> tuple[Node, int]:
    """Rewrites ``B[tt]``/``W[tt]`` to passes on boards up to ``max_size`` square."""
    if width > max_size or height > max_size:
        return root, 0
    count = 0
    # Post-order without recursion: a node is rebuilt once all its children are on `done`
    done: list[Node] = []
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))
            continue
        split = len(done) - len(node.children)
        children = tuple(done[split:])
        del done[split:]
        properties = node.properties
        if any(p.name in _PASS_MOVES and p.value == PASS_AS_TT_COORD for p in properties):
            count += 1
            properties = tuple(
                Property(p.name, None) if p.name in _PASS_MOVES and p.value == PASS_AS_TT_COORD else p
                for p in properties
            )
        if properties is node.properties and all(a is b for a, b in zip(children, node.children)):
            done.append(node)
        else:
            done.append(Node(properties, children))
    return done[0], count


def _check_tree(index: int, root: Node, max_size: int) -> tuple[bool, object]:
    size = root.find_property("SZ")
    if size is None:
        return False, f"Missing size property (SZ) in root node of game tree {index + 1}"
    width, height = size.value
    root, count = _normalize_passes(root, width, height, max_size)
    if count:
        logger.debug("Game tree %d: converted tt moves to passes in %d nodes", index + 1, count)
    return True, root


def parse(text: str, config: TypedConfigReader | None = None) -> Collection:
    """Parses SGF text into a collection.

    Args:
        text: The SGF text.
        config: Optional config; ``board.pass_normalization_max`` is used.

    Returns:
        The collection; every tree has a root with ``SZ``.

    Raises:
        SgfParseError: On a syntax error (one entry) or when trees are invalid
            (one entry per invalid tree). No partial collection is returned.
    """
    max_size = (config or TypedConfigReader()).get_board().pass_normalization_max
    trees = SgfParser(text).parse_trees()
    outcome = and_results(_check_tree(index, root, max_size) for index, root in enumerate(trees))
    if not outcome.ok:
        raise SgfParseError(outcome.values, context={"trees": len(trees)})
    logger.debug("Parsed %d game trees", len(outcome.values))
    return Collection(tuple(outcome.values))


def detect_encoding(contents: bytes, config: TypedConfigReader | None = None) -> str:
    """Encoding of raw SGF bytes: the CA property, else chardet, else the configured default."""
    files = (config or TypedConfigReader()).get_files()
    match = re.search(rb"CA\s*\[(.*?)\]", contents)
    if match:
        return match[1].decode("ascii", errors="ignore").strip() or files.default_encoding
    if files.detect_encoding:
        detected = chardet.detect(contents[:ENCODING_SNIFF_BYTES])["encoding"]
        # Windows-1252 and GB2312 detections are usually GBK in practice
        if detected in ("Windows-1252", "GB2312"):
            return "GBK"
        if detected is not None:
            return detected
    return files.default_encoding


def parse_file(filename: str, encoding: str | None = None, config: TypedConfigReader | None = None) -> Collection:
    """Parses an SGF file; the encoding is detected if not given."""
    with open(filename, "rb") as f:
        contents = f.read()
    encoding = encoding or detect_encoding(contents, config)
    try:
        decoded = contents.decode(encoding=encoding, errors="ignore")
    except LookupError:
        logger.warning("Unknown encoding %r in %s, falling back to %s", encoding, filename, DEFAULT_ENCODING)
        decoded = contents.decode(encoding=DEFAULT_ENCODING, errors="ignore")
    logger.debug("Read %s (%d bytes, %s)", filename, len(contents), encoding)
    return parse(decoded, config)
