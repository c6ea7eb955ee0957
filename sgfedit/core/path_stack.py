"""Navigation steps and the bookmark stack kept by the editor.

A path stack is a list of bookmarks, the most recent one last. A bookmark is
the list of steps that leads from the current position back to where the
bookmark was pushed, in replay order (``bookmark[0]`` is taken first). Older
bookmarks continue from where the newer ones end.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class Step:
    """``UP(i)`` leaves child ``i`` for its parent; ``DOWN(i)`` enters child ``i``."""

    direction: Direction
    index: int

    @classmethod
    def up(cls, index: int) -> "Step":
        return cls(Direction.UP, index)

    @classmethod
    def down(cls, index: int) -> "Step":
        return cls(Direction.DOWN, index)

    @property
    def is_up(self) -> bool:
        return self.direction is Direction.UP

    def __repr__(self) -> str:
        return f"{'Up' if self.is_up else 'Down'}({self.index})"


def reverse_step(step: Step) -> Step:
    return Step(Direction.DOWN if step.is_up else Direction.UP, step.index)


PathStack = list[list[Step]]


def record_step(path_stack: PathStack, step: Step) -> None:
    """Records a step just taken in the top bookmark.

    The bookmark gains the inverse step, unless its next step is exactly the
    step taken, in which case that step is consumed.
    """
    if not path_stack:
        return
    top = path_stack[-1]
    if top and top[0] == step:
        del top[0]
    else:
        top.insert(0, reverse_step(step))


def merge_top(path_stack: PathStack) -> None:
    """Discards the top bookmark, keeping its steps in front of the next-older one."""
    top = path_stack.pop()
    if path_stack:
        path_stack[-1] = top + path_stack[-1]


def copy_path_stack(path_stack: PathStack) -> PathStack:
    return [list(bookmark) for bookmark in path_stack]


def _shift(step: Step, index: int) -> Step:
    return Step(step.direction, step.index + 1) if step.index >= index else step


def renumber_for_insert(path_stack: PathStack, index: int) -> PathStack:
    """Adjusts every bookmark after a child was inserted at ``index`` of the current node.

    Bookmarks are walked in replay order (top first) from the current node,
    tracking the way back to it. A step that leaves the current node downward,
    or enters it upward, names one of its children; if that child index is at
    or after ``index`` it moves up by one. Returns a new stack.
    """
    to_start: list[Step] = []  # steps back to the current node, next one first
    renumbered: list[list[Step]] = []
    for bookmark in reversed(path_stack):
        new_bookmark = []
        for step in bookmark:
            if not to_start:
                new_step = step if step.is_up else _shift(step, index)
                to_start = [reverse_step(step)]
            else:
                if to_start[0] == step:
                    to_start = to_start[1:]
                else:
                    to_start = [reverse_step(step), *to_start]
                new_step = _shift(step, index) if not to_start and step.is_up else step
            new_bookmark.append(new_step)
        renumbered.append(new_bookmark)
    renumbered.reverse()
    return renumbered
