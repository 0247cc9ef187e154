"""
Import Utilities.

Resolve extension implementations from dotted import paths.
"""

import importlib
from typing import Any


class ImportPath(str):
    """
    A string marked as the import path of an object.
    
    Plain strings are ordinary values; only an ImportPath is resolved
    with ``import_string`` by the extension registry.
    
    Example:
        ImportPath("my_ext.functions:Concat")
    """
    
    __slots__ = ()
    
    def resolve(self) -> Any:
        return import_string(self)
    
    def __repr__(self) -> str:
        return f"ImportPath({str.__repr__(self)})"


def import_string(path: str) -> Any:
    """
    Import an object from a dotted path.
    
    Accepts both "package.module:Name" and "package.module.Name".
    
    Args:
        path: Import path of the object
        
    Returns:
        The imported object
        
    Raises:
        ImportError: If the module or attribute cannot be found
    """
    if ":" in path:
        module_path, _, attr_path = path.partition(":")
    else:
        module_path, _, attr_path = path.rpartition(".")
    
    if not module_path or not attr_path:
        raise ImportError(f"'{path}' is not a valid import path")
    
    module = importlib.import_module(module_path)
    
    target = module
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError:
            raise ImportError(f"Module '{module_path}' has no attribute '{attr_path}'") from None
    return target
