"""figfix model layer -- public type re-exports."""

from figfix.model.context import RewriteContext
from figfix.model.diagnostic import Diagnostic, Severity
from figfix.model.markup import (
    Attribute,
    Code,
    Document,
    Element,
    Expression,
    RawValue,
    Style,
    Text,
)
from figfix.model.stats import Stats
from figfix.model.variables import FontDescriptor, VariableFileError, VariableTable

__all__ = [
    # markup
    "Attribute",
    "Code",
    "Document",
    "Element",
    "Expression",
    "RawValue",
    "Style",
    "Text",
    # variables
    "FontDescriptor",
    "VariableFileError",
    "VariableTable",
    # context
    "RewriteContext",
    "Stats",
    # diagnostic
    "Severity",
    "Diagnostic",
]
