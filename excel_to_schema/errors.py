"""Errors raised while compiling definition sheets into a schema."""


class SchemaError(Exception):
    """Base class for all compiler errors."""


class MissingDefinitionError(SchemaError):
    """A definition sheet was requested but is not in the workbook."""

    def __init__(self, sheet_name, suggestions=None):
        self.sheet_name = sheet_name
        self.suggestions = list(suggestions or [])
        super().__init__(self._message())

    def _message(self):
        return (f'"{self.sheet_name}" sheet not found! '
                f'Similar sheets found: {", ".join(self.suggestions)}')


class UnresolvedReferenceError(MissingDefinitionError):
    """A field type is neither a basic type nor the name of a sheet."""

    def __init__(self, sheet_name, suggestions=None,
                 referenced_from=None, row=None):
        self.referenced_from = referenced_from
        self.row = row
        super().__init__(sheet_name, suggestions)

    def _message(self):
        msg = super()._message()
        if self.referenced_from is not None:
            msg += f" (referenced from '{self.referenced_from}' row {self.row})"
        return msg


class EmptyDefinitionError(SchemaError):
    """A definition sheet exists but holds no data rows."""

    def __init__(self, sheet_name):
        self.sheet_name = sheet_name
        super().__init__(f'Sheet "{sheet_name}" does not have proper data to extract')


class CircularReferenceError(SchemaError):
    """A sheet references itself, directly or through other sheets."""

    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__("Circular sheet reference: " + " -> ".join(self.chain))


class MissingPageError(SchemaError):
    """A simple node was flattened before the page for its template existed."""

    def __init__(self, page_name, tag_name):
        self.page_name = page_name
        self.tag_name = tag_name
        super().__init__(f"No page '{page_name}' for column '{tag_name}'")


class CompileError(SchemaError):
    """Top-level wrapper naming the root sheet being compiled."""

    def __init__(self, root_sheet, cause):
        self.root_sheet = root_sheet
        super().__init__(f"Failed to compile '{root_sheet}': {cause}")
