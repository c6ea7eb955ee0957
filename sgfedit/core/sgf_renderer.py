"""Game trees to SGF text.

A run of single-child nodes is written as a flat ``;`` sequence and every
branch point opens one parenthesized subtree per child, so ``parse(render(c))``
gives back ``c``. Each game tree is followed by a newline.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from sgfedit.core.game_node import Collection, Node
from sgfedit.core.sgf_values import render_values


def node_text(node: Node) -> str:
    return ";" + "".join(prop.name + render_values(prop.info.value_type, prop.value) for prop in node.properties)


def _tree_chunks(root: Node) -> Iterator[str]:
    stack: list[str | Node] = ["\n", ")", root, "("]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            yield item
            continue
        yield node_text(item)
        if len(item.children) == 1:
            stack.append(item.children[0])
        else:
            for child in reversed(item.children):
                stack += [")", child, "("]


def render_node_tree(root: Node) -> str:
    """One game tree, ``(`` .. ``)`` plus the trailing newline."""
    return "".join(_tree_chunks(root))


def render(collection: Collection | Iterable[Node]) -> str:
    return "".join(chunk for root in collection for chunk in _tree_chunks(root))


class SgfText:
    """Lazily rendered SGF text.

    Iterating yields the text one character at a time; every iteration starts
    over from the beginning, so the object can be streamed more than once.
    """

    def __init__(self, collection: Collection | Iterable[Node]) -> None:
        self._trees = tuple(collection)

    def __iter__(self) -> Iterator[str]:
        for root in self._trees:
            for chunk in _tree_chunks(root):
                yield from chunk

    def chunks(self) -> Iterator[str]:
        """The text in node-sized pieces, for writing to a stream."""
        for root in self._trees:
            yield from _tree_chunks(root)

    def __str__(self) -> str:
        return render(self._trees)


def render_lazy(collection: Collection | Iterable[Node]) -> SgfText:
    return SgfText(collection)
