"""Shared SGF snippets and editor builders for the test suite."""

from sgfedit.core.cursor import Cursor
from sgfedit.core.editor import GoEditor
from sgfedit.core.game_node import Node
from sgfedit.core.sgf_parser import parse

LINEAR_SGF = "(;SZ[9];B[ab];W[cd])"

# Root with two variations, the first one three moves deep:
#   root -> B[aa] -> W[bb] -> B[cc]
#        -> B[dd]
BRANCHED_SGF = "(;SZ[9](;B[aa];W[bb];B[cc])(;B[dd]))"

GAME_INFO_SGF = "(;SZ[19]PB[Black]PW[White]KM[6.5];B[dd];W[pp])"


def parse_one(text: str) -> Node:
    """Parse text holding a single game tree and return its root."""
    collection = parse(text)
    assert len(collection) == 1
    return collection[0]


def editor_for(text: str) -> GoEditor:
    return GoEditor(Cursor.root(parse_one(text)))
