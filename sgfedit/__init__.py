"""sgfedit: SGF game records for Go.

Parse SGF text into immutable game trees, edit them through a cursor-based
engine with bookmarks and events, and render them back to SGF.
A JSON config file can be read with :func:`load_config`, or its path passed to
`BoardController.new_board` and `BoardController.from_file`.
"""

from sgfedit.common.config_store import load_config
from sgfedit.core.bigfloat import Bigfloat
from sgfedit.core.controller import BoardController
from sgfedit.core.cursor import Cursor
from sgfedit.core.editor import GoEditor, eval_go, exec_go, run_go
from sgfedit.core.errors import InvariantFailure, PreconditionViolation, SgfEditError, SgfParseError
from sgfedit.core.game_node import Collection, Node
from sgfedit.core.properties import Property
from sgfedit.core.sgf_parser import parse, parse_file
from sgfedit.core.sgf_renderer import SgfText, render, render_lazy, render_node_tree
from sgfedit.core.state import EventType

__version__ = "0.1.0"

__all__ = [
    "Bigfloat",
    "BoardController",
    "Collection",
    "Cursor",
    "EventType",
    "GoEditor",
    "InvariantFailure",
    "Node",
    "PreconditionViolation",
    "Property",
    "SgfEditError",
    "SgfParseError",
    "SgfText",
    "eval_go",
    "exec_go",
    "load_config",
    "parse",
    "parse_file",
    "render",
    "render_lazy",
    "render_node_tree",
    "run_go",
]
