"""
Grid Tree Builder
=================
Compiles a root definition sheet, and every sheet it references, into a
single tree of :class:`~excel_to_schema.model.Node` objects.

Each data row of a sheet is read in two parts:

* the hierarchy columns (left to right) name nested structural nodes.
  Rows that repeat the same hierarchy path share the same nodes;
* the field columns (name, type, notes) describe one field, attached under
  the deepest hierarchy node of the row.  A field whose type is not a basic
  type names another sheet, which is compiled recursively and becomes the
  field's children.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .config import GridLayout
from .errors import (
    CircularReferenceError,
    EmptyDefinitionError,
    MissingDefinitionError,
    UnresolvedReferenceError,
)
from .model import Leaf, Node, NodeConfig, Reference, Structural
from .patterns import (
    find_similar_sheet_names,
    is_basic_type,
    is_placeholder,
    replace_placeholders,
)

logger = logging.getLogger(__name__)


class GridTreeBuilder:
    """Build a node tree from a :class:`~excel_to_schema.workbook.GridSource`.

    Args:
        source: Spreadsheet access (sheet names, extents, cell text).
        sub_processes: Identifiers (e.g. ``WC1``, ``COM``) that set the
            sub-process context when they appear in a hierarchy or name cell.
        data_types: Basic type names.  Any other non-empty type is taken as
            the name of a sheet to reference.
        layout: Column and row positions; defaults to :class:`GridLayout`.
    """

    def __init__(self, source, sub_processes: Sequence[str],
                 data_types: Sequence[str], layout: Optional[GridLayout] = None):
        self.source = source
        self.sub_processes = set(sub_processes)
        self.data_types = set(data_types)
        self.layout = layout or GridLayout()
        self._recalculated = set()

    def build(self, root_sheet: str) -> NodeConfig:
        """Compile *root_sheet* and return its metadata and root nodes."""
        self._recalculated = set()
        extent = self._open_sheet(root_sheet, self.layout.root_first_row)

        desc_row, desc_col = self.layout.description_cell
        version_row, version_col = self.layout.version_cell
        config = NodeConfig(
            description=self.source.cell_text(root_sheet, desc_row, desc_col),
            version=self.source.cell_text(root_sheet, version_row, version_col),
        )
        config.nodes = self._scan_sheet(
            root_sheet,
            first_row=self.layout.root_first_row,
            extent=extent,
            sub_process=None,
            desc_pattern="",
            chain=(root_sheet,),
            is_root=True,
        )
        logger.info(f"Built tree for '{root_sheet}': {len(config.nodes)} root nodes, "
                    f"{sum(1 for _ in config.walk())} nodes total")
        return config

    # ------------------------------------------------------------------
    # Sheet access
    # ------------------------------------------------------------------

    def _open_sheet(self, sheet_name, first_row, referenced_from=None, row=None):
        """Validate *sheet_name* and return its row extent."""
        if not self.source.exists(sheet_name):
            suggestions = find_similar_sheet_names(
                sheet_name, sorted(self.source.sheet_names()))
            if referenced_from is None:
                raise MissingDefinitionError(sheet_name, suggestions)
            raise UnresolvedReferenceError(sheet_name, suggestions,
                                           referenced_from=referenced_from,
                                           row=row)

        extent = self.source.row_extent(sheet_name)
        if extent < first_row:
            raise EmptyDefinitionError(sheet_name)

        if sheet_name not in self._recalculated:
            self.source.recalculate(sheet_name)
            self._recalculated.add(sheet_name)
        return extent

    def _resolve_reference(self, sheet_name, sub_process, desc_pattern,
                           chain, referenced_from, row) -> List[Node]:
        """Compile a referenced sheet and return its root nodes."""
        if sheet_name in chain:
            raise CircularReferenceError(chain + (sheet_name,))

        first_row = self.layout.reference_first_row
        extent = self._open_sheet(sheet_name, first_row,
                                  referenced_from=referenced_from, row=row)
        logger.debug(f"Resolving '{sheet_name}' from '{referenced_from}' row {row} "
                     f"(sub-process={sub_process!r})")
        return self._scan_sheet(
            sheet_name,
            first_row=first_row,
            extent=extent,
            sub_process=sub_process,
            desc_pattern=desc_pattern,
            chain=chain + (sheet_name,),
            is_root=False,
        )

    # ------------------------------------------------------------------
    # Row scan
    # ------------------------------------------------------------------

    def _scan_sheet(self, sheet_name, first_row, extent, sub_process,
                    desc_pattern, chain, is_root) -> List[Node]:
        cell = self.source.cell_text
        layout = self.layout
        roots: List[Node] = []
        # (path tuple) -> node; scoped to this scan of this sheet
        arena: Dict[Tuple[str, ...], Node] = {}

        for row in range(first_row, extent + 1):
            path: Tuple[str, ...] = ()
            anchor = None
            row_sub_process = sub_process

            for col in range(1, layout.hierarchy_columns + 1):
                text = cell(sheet_name, row, col)
                if not text:
                    continue
                path = path + (text,)
                if text in self.sub_processes:
                    row_sub_process = text

                node = arena.get(path)
                if node is None:
                    node = Node(name=text, type=Structural(), template=sheet_name)
                    arena[path] = node
                    parent = arena.get(path[:-1]) if len(path) > 1 else None
                    if parent is None:
                        roots.append(node)
                    else:
                        parent.add_child(node)
                anchor = node

            name = cell(sheet_name, row, layout.name_column)
            type_text = cell(sheet_name, row, layout.type_column)
            notes = cell(sheet_name, row, layout.notes_column)

            if (is_root and anchor is None and name and notes
                    and not is_basic_type(notes, self.data_types)):
                roots.append(self._notes_reference(
                    sheet_name, row, notes, row_sub_process, chain))
                continue

            # A nameless row only carries a field under a root-sheet hierarchy
            if not name and (not is_root or anchor is None or not type_text):
                continue

            field_node = self._field_node(
                sheet_name, row, name, type_text, notes,
                row_sub_process, desc_pattern, chain)
            if anchor is None:
                roots.append(field_node)
            else:
                anchor.add_child(field_node)

        logger.debug(f"Scanned '{sheet_name}' rows {first_row}-{extent}: "
                     f"{len(roots)} root nodes")
        return roots

    def _field_node(self, sheet_name, row, name, type_text, notes,
                    sub_process, desc_pattern, chain) -> Node:
        """Build the node described by the name/type/notes columns of *row*."""
        basic = is_basic_type(type_text, self.data_types)
        if basic:
            description = notes
        else:
            description = "" if is_placeholder(notes) else notes
        if desc_pattern:
            description = replace_placeholders(desc_pattern, sub_process, notes)

        if name in self.sub_processes:
            sub_process = name

        if basic:
            node = Node(name=name, type=Leaf(type_text), template=sheet_name,
                        description=description)
        elif type_text:
            node = Node(name=name, type=Reference(type_text),
                        template=sheet_name, description=description)
            node.children = self._resolve_reference(
                type_text,
                sub_process=sub_process,
                desc_pattern=notes if is_placeholder(notes) else "",
                chain=chain,
                referenced_from=sheet_name,
                row=row,
            )
        else:
            node = Node(name=name, type=Structural(), template=sheet_name,
                        description=description)
        return node

    def _notes_reference(self, sheet_name, row, notes, sub_process, chain) -> Node:
        """A root-sheet row whose only type information is the notes column."""
        node = Node(name=notes, type=Reference(notes), template=sheet_name,
                    description="" if is_placeholder(notes) else notes)
        node.children = self._resolve_reference(
            notes,
            sub_process=sub_process,
            desc_pattern="",
            chain=chain,
            referenced_from=sheet_name,
            row=row,
        )
        return node


def build_tree(source, root_sheet, sub_processes, data_types, layout=None):
    """Compile *root_sheet* from *source* into a :class:`NodeConfig`."""
    builder = GridTreeBuilder(source, sub_processes, data_types, layout)
    return builder.build(root_sheet)
