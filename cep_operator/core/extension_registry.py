"""
Engine Extension Registry.

Holds the named extensions every engine manager built from a context gets
registered with. Registration is additive: merging only overwrites names
that collide.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from .exceptions import ExtensionLoadError, NullArgumentError, check_not_none
from ..utils.imports import ImportPath


logger = logging.getLogger(__name__)


class ExtensionRegistry:
    """
    Registry of engine extensions keyed by extension name.
    
    Handles are opaque to the registry, strings included. Only a handle
    wrapped in ImportPath ("package.module:Name") is imported when merged,
    so that a bad path fails while the job is configured.
    
    Example:
        registry = ExtensionRegistry()
        registry.merge({"custom:plus": PlusFunction})
        registry.merge({"str:concat": ImportPath("my_ext.functions:Concat")})
    """
    
    def __init__(self):
        self._extensions: Dict[str, Any] = {}
    
    def merge(self, extensions: Mapping[str, Any]) -> None:
        """
        Insert or overwrite extensions by name.
        
        Existing entries not named in ``extensions`` are kept.
        
        Args:
            extensions: Extension name to handle mapping
            
        Raises:
            NullArgumentError: If the mapping, a name or a handle is None
            ExtensionLoadError: If an ImportPath handle cannot be imported
        """
        check_not_none(extensions, "extensions")
        
        resolved: Dict[str, Any] = {}
        for name, handle in extensions.items():
            check_not_none(name, "extensionName")
            if handle is None:
                raise NullArgumentError(f"extensions[{name}]")
            resolved[name] = self._resolve(name, handle)
        
        overwritten = [name for name in resolved if name in self._extensions]
        self._extensions.update(resolved)
        
        if overwritten:
            logger.info(f"Overwrote extensions: {overwritten}")
        logger.debug(f"Merged extensions: {list(resolved)}")
    
    @staticmethod
    def _resolve(name: str, handle: Any) -> Any:
        if not isinstance(handle, ImportPath):
            return handle
        try:
            return handle.resolve()
        except ImportError as e:
            raise ExtensionLoadError(name, str(handle), str(e)) from e
    
    def snapshot(self) -> Mapping[str, Any]:
        """
        Get an immutable view of the current registrations.
        
        The view is detached from the registry: later merges are not
        visible through it.
        """
        return MappingProxyType(dict(self._extensions))
    
    def get(self, name: str) -> Any:
        """
        Get an extension handle by name.
        
        Raises:
            KeyError: If no extension is registered under name
        """
        return self._extensions[name]
    
    def names(self) -> List[str]:
        """Get registered extension names."""
        return list(self._extensions.keys())
    
    def copy(self) -> "ExtensionRegistry":
        """Copy the registry into an independent mapping."""
        clone = ExtensionRegistry()
        clone._extensions = dict(self._extensions)
        return clone
    
    def __contains__(self, name: str) -> bool:
        return name in self._extensions
    
    def __len__(self) -> int:
        return len(self._extensions)
    
    def __repr__(self) -> str:
        return f"ExtensionRegistry(extensions={self.names()})"
