"""
Schema Model
============
Data structures shared by the grid builder and the page flattener: the
compiled node tree, the typed node kinds, and the flattened pages/columns.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Leaf:
    """A field whose type is one of the recognised basic data types."""
    basic_type: str

    @property
    def type_name(self) -> str:
        return self.basic_type


@dataclass(frozen=True)
class Reference:
    """A field whose type is another definition sheet."""
    template_name: str

    @property
    def type_name(self) -> str:
        return self.template_name


@dataclass(frozen=True)
class Structural:
    """A node that only establishes hierarchy (no concrete type)."""

    @property
    def type_name(self) -> str:
        return ""


NodeType = Union[Leaf, Reference, Structural]


@dataclass(eq=False)
class Node:
    """A vertex of the compiled configuration tree.

    Nodes compare by identity: two rows that share a hierarchy path share
    the same ``Node`` object.
    """
    name: str
    type: NodeType = field(default_factory=Structural)
    template: Optional[str] = None
    description: str = ""
    children: List["Node"] = field(default_factory=list)
    ancestor_labels: List[Tuple[str, str]] = field(default_factory=list)

    def __setattr__(self, key, value):
        if key == "template" and getattr(self, "template", None) is not None:
            raise AttributeError(
                f"template of node '{self.name}' is already set "
                f"to '{self.template}'")
        super().__setattr__(key, value)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def add_child(self, child: "Node") -> "Node":
        self.children.append(child)
        return child

    def walk(self) -> Iterator["Node"]:
        """Yield this node and all descendants, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class NodeConfig:
    """The compiled root sheet: metadata cells plus the root node list."""
    description: str = ""
    version: str = ""
    nodes: List[Node] = field(default_factory=list)

    def walk(self) -> Iterator[Node]:
        for node in self.nodes:
            yield from node.walk()


def flatten_labels(labels: List[Tuple[str, str]]) -> List[str]:
    """Return ``[name, description, name, description, ...]``."""
    flat = []
    for name, description in labels:
        flat.append(name)
        flat.append(description)
    return flat


@dataclass
class Column:
    """One row of a page: a simple field or a typed reference to a page."""
    tag_name: str
    data_type: str
    description: str = ""
    ancestor_labels: List[str] = field(default_factory=list)


@dataclass
class Page:
    """A flattened table holding the columns for one template."""
    name: str
    rows: List[Column] = field(default_factory=list)


class PageSet:
    """Ordered collection of pages keyed by name.

    ``create`` is idempotent: asking for an existing page returns it as-is.
    """

    def __init__(self, names=None):
        self._pages = {}
        for name in names or []:
            self.create(name)

    def __contains__(self, name):
        return name in self._pages

    def __iter__(self):
        return iter(self._pages.values())

    def __len__(self):
        return len(self._pages)

    def get(self, name) -> Optional[Page]:
        return self._pages.get(name)

    def create(self, name) -> Page:
        page = self._pages.get(name)
        if page is None:
            page = Page(name=name)
            self._pages[name] = page
        return page

    @property
    def names(self) -> List[str]:
        return list(self._pages)
