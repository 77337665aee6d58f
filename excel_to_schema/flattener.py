"""
Node Classifier and Tree Flattener
==================================
Projects a compiled node tree onto one page per template.

Every node is classified as one of:

* **simple** - no children; becomes one column on its template's page.
* **object level** - a grouping node with at least one child of its own
  template.  It emits nothing; its name and description are handed down
  to the children as ancestor labels.
* **complex** - children of other templates only.  It emits one reference
  column per distinct child template and creates the pages for them.

Children of a complex node are only flattened when that node created at
least one new page.  A template whose page already exists is assumed to
have been filled in by an earlier occurrence of the same schema.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import MissingPageError
from .model import Column, Node, NodeConfig, PageSet, flatten_labels

logger = logging.getLogger(__name__)


class NodeKind(enum.Enum):
    SIMPLE = "simple"
    OBJECT_LEVEL = "object_level"
    COMPLEX = "complex"


@dataclass
class NodeInfo:
    kind: NodeKind
    name: str
    description: str
    template: Optional[str]
    simple_type: str = ""
    complex_types: List[str] = field(default_factory=list)


def classify(node: Node) -> NodeInfo:
    """Classify *node* as simple, object level or complex."""
    info = NodeInfo(
        kind=NodeKind.SIMPLE,
        name=node.name,
        description=node.description,
        template=node.template,
    )
    if not node.children:
        info.simple_type = node.type.type_name
        return info

    if any(child.template == node.template for child in node.children):
        info.kind = NodeKind.OBJECT_LEVEL
        return info

    info.kind = NodeKind.COMPLEX
    # dict keeps first-appearance order
    info.complex_types = list(dict.fromkeys(
        child.template for child in node.children))
    return info


def flatten(nodes, pages: PageSet) -> PageSet:
    """Add the columns of *nodes* (a node or a list of nodes) to *pages*.

    The page for each top-level node's template must already exist (see
    :func:`flatten_config`).
    """
    if isinstance(nodes, Node):
        nodes = [nodes]
    for node in nodes:
        _flatten_node(node, pages)
    return pages


def _flatten_node(node: Node, pages: PageSet):
    info = classify(node)
    labels = flatten_labels(node.ancestor_labels)

    if info.kind is NodeKind.SIMPLE:
        page = pages.get(info.template)
        if page is None:
            raise MissingPageError(info.template, info.name)
        page.rows.append(Column(
            tag_name=info.name,
            data_type=info.simple_type,
            description=info.description,
            ancestor_labels=labels,
        ))

    elif info.kind is NodeKind.OBJECT_LEVEL:
        for child in node.children:
            child.ancestor_labels.extend(node.ancestor_labels)
            child.ancestor_labels.append((info.name, info.description))
            _flatten_node(child, pages)

    else:
        page = pages.get(info.template)
        created_page = False
        for complex_type in info.complex_types:
            if page is not None:
                page.rows.append(Column(
                    tag_name=info.name,
                    data_type=complex_type,
                    description=info.description,
                    ancestor_labels=list(labels),
                ))
            else:
                logger.debug(f"No page '{info.template}' for reference "
                             f"column '{info.name}' -> '{complex_type}'")
            if complex_type not in pages:
                pages.create(complex_type)
                created_page = True

        if created_page:
            for child in node.children:
                _flatten_node(child, pages)
        else:
            logger.debug(f"Skipping children of '{info.name}': pages "
                         f"{info.complex_types} already flattened")


def flatten_config(config: NodeConfig, root_template: str,
                   pages: Optional[PageSet] = None) -> PageSet:
    """Seed the root page and flatten every root node of *config*."""
    pages = pages if pages is not None else PageSet()
    pages.create(root_template)
    flatten(config.nodes, pages)
    logger.info(f"Flattened '{root_template}' into {len(pages)} pages, "
                f"{sum(len(p.rows) for p in pages)} columns")
    return pages
