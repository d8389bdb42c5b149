"""Menu tree: categories containing actions and subcategories.

A menu item is either a `Category` (a label and child items) or an `Action` (a label
and a callback). Code that walks the tree dispatches on the variant with `match`.

Items are addressed by a path of labels, e.g. `("View", "Graph")`.

Example::

    items = [Category("File", [Action("Exit", on_exit)]),
             Category("View", [Action("Graph", open_graph),
                               Category("Debug", [Action("Log", open_log)])])]
    activate(items, ("View", "Debug", "Log"))  # calls `open_log()`
"""

__all__ = ["Category", "Action", "MenuItem",
           "find", "activate", "walk"]

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from dataclasses import dataclass, field
from typing import Callable, Iterator, Sequence, Tuple, Union


@dataclass(frozen=True)
class Action:
    label: str
    callback: Callable[[], None]


@dataclass(frozen=True)
class Category:
    label: str
    children: Tuple["MenuItem", ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))  # accept any sequence, store immutably
        labels = [child.label for child in self.children]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise ValueError(f"Category.__init__: '{self.label}': duplicate child labels {duplicates}")


MenuItem = Union[Category, Action]


def find(items: Sequence[MenuItem], path: Sequence[str]) -> MenuItem:
    """Return the menu item at `path` (a sequence of labels), starting from the top-level `items`.

    Raises `KeyError` if there is no such item, or if the path continues past an `Action`.
    """
    if not path:
        raise KeyError("find: empty menu path")
    current: Sequence[MenuItem] = items
    item = None
    for depth, label in enumerate(path):
        for candidate in current:
            if candidate.label == label:
                item = candidate
                break
        else:
            raise KeyError(f"find: no menu item '{label}' at {tuple(path[:depth])}")
        match item:
            case Category(children=children):
                current = children
            case Action():
                if depth != len(path) - 1:
                    raise KeyError(f"find: menu item {tuple(path[:depth + 1])} is an action, it has no children")
    return item


def activate(items: Sequence[MenuItem], path: Sequence[str]) -> None:
    """Call the callback of the action at `path`.

    Raises `KeyError` if there is no such item, and `ValueError` if the item is a category.
    """
    match find(items, path):
        case Action(callback=callback):
            logger.info(f"activate: {tuple(path)}")
            callback()
        case Category(label=label):
            raise ValueError(f"activate: menu item '{label}' at {tuple(path)} is a category, not an action")


def walk(items: Sequence[MenuItem], prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], MenuItem]]:
    """Yield `(path, item)` for each item in the tree, depth first, parents before children."""
    for item in items:
        path = prefix + (item.label,)
        yield path, item
        match item:
            case Category(children=children):
                yield from walk(children, path)
            case Action():
                pass
