"""
Utility modules for the CEP operator context.
"""

from cep_operator.utils.imports import ImportPath, import_string

__all__ = [
    "ImportPath",
    "import_string",
]
