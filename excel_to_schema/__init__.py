"""Excel-to-Schema Compiler.

Compiles a hierarchical type schema, written as a set of linked
definition sheets, into:

  * a **node tree** - one instantiated configuration, built by following
    hierarchy columns and cross-sheet type references
    (:mod:`builder`);
  * **pages** - one flat table per type, listing its simple fields and
    typed references to other pages (:mod:`flattener`).

The :mod:`report` module writes the pages back to an Excel workbook.
"""

from .builder import GridTreeBuilder, build_tree
from .compiler import compile_tree, compile_workbook
from .config import GridLayout, load_config
from .errors import (
    CircularReferenceError,
    CompileError,
    EmptyDefinitionError,
    MissingDefinitionError,
    MissingPageError,
    SchemaError,
    UnresolvedReferenceError,
)
from .flattener import NodeKind, classify, flatten, flatten_config
from .model import (
    Column,
    Leaf,
    Node,
    NodeConfig,
    Page,
    PageSet,
    Reference,
    Structural,
)
from .report import write_pages_report
from .workbook import OpenpyxlGridSource

__all__ = [
    "GridTreeBuilder",
    "build_tree",
    "compile_tree",
    "compile_workbook",
    "GridLayout",
    "load_config",
    "SchemaError",
    "MissingDefinitionError",
    "UnresolvedReferenceError",
    "EmptyDefinitionError",
    "CircularReferenceError",
    "MissingPageError",
    "CompileError",
    "NodeKind",
    "classify",
    "flatten",
    "flatten_config",
    "Column",
    "Leaf",
    "Node",
    "NodeConfig",
    "Page",
    "PageSet",
    "Reference",
    "Structural",
    "write_pages_report",
    "OpenpyxlGridSource",
]
