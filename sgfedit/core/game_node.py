"""Immutable game-tree nodes and collections."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from sgfedit.common.lists import list_insert_at
from sgfedit.core.constants import DEFAULT_BOARD_SIZE
from sgfedit.core.properties import Property, PropertyType, board_size


@dataclass(frozen=True)
class Node:
    """One node of a game tree.

    Nodes never change; every editing helper returns a new node that shares
    the untouched parts. A node exclusively owns its children.
    """

    properties: tuple[Property, ...] = ()
    children: tuple["Node", ...] = ()

    @classmethod
    def new_root(cls, width: int = DEFAULT_BOARD_SIZE, height: int | None = None) -> "Node":
        """An empty game record: ``GM[1]FF[4]SZ[..]``."""
        return cls((Property("GM", 1), Property("FF", 4), board_size(width, height)))

    def __repr__(self) -> str:
        return f"Node({list(self.properties)!r}, children={len(self.children)})"

    def find_property(self, name: str) -> Property | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def get_value(self, name: str, default: Any = None) -> Any:
        prop = self.find_property(name)
        return prop.value if prop is not None else default

    def has_property(self, name: str) -> bool:
        return self.find_property(name) is not None

    def properties_of_type(self, property_type: PropertyType) -> list[Property]:
        return [prop for prop in self.properties if prop.property_type is property_type]

    @property
    def has_game_info(self) -> bool:
        return any(prop.is_game_info for prop in self.properties)

    def with_properties(self, properties: Iterable[Property]) -> "Node":
        return Node(tuple(properties), self.children)

    def with_children(self, children: Iterable["Node"]) -> "Node":
        return Node(self.properties, tuple(children))

    def set_property(self, prop: Property) -> "Node":
        """Replaces the property with the same name in place, or appends it."""
        if self.has_property(prop.name):
            return self.with_properties(prop if p.name == prop.name else p for p in self.properties)
        return self.with_properties((*self.properties, prop))

    def remove_property(self, name: str) -> "Node":
        return self.with_properties(p for p in self.properties if p.name != name)

    def filter_properties(self, keep: Callable[[Property], bool]) -> "Node":
        return self.with_properties(p for p in self.properties if keep(p))

    def add_child(self, child: "Node") -> "Node":
        return self.with_children((*self.children, child))

    def add_child_at(self, index: int, child: "Node") -> "Node":
        """Inserts ``child`` before position ``index`` (clamped to the ends)."""
        return self.with_children(list_insert_at(index, child, self.children))

    def replace_child(self, index: int, child: "Node") -> "Node":
        children = list(self.children)
        children[index] = child
        return self.with_children(children)

    def walk(self) -> Iterator["Node"]:
        """This node and all its descendants, depth first, without recursion."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class Collection:
    """The game trees of one SGF file, in order."""

    trees: tuple[Node, ...] = ()

    def __iter__(self) -> Iterator[Node]:
        return iter(self.trees)

    def __len__(self) -> int:
        return len(self.trees)

    def __getitem__(self, index: int) -> Node:
        return self.trees[index]
