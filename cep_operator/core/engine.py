"""
Engine Managers and the Engine Factory.

An engine manager compiles and runs program text with a set of registered
extensions. Every parallel worker needs its own manager, so the factory
builds a fresh instance per call and never caches one.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from .exceptions import check_not_none
from .extension_registry import ExtensionRegistry
from .identity import IdentityGenerator


logger = logging.getLogger(__name__)


class EngineManager(ABC):
    """Capability an engine runtime exposes to the operator context."""
    
    @abstractmethod
    def register_extension(self, name: str, handle: Any) -> None:
        """Register an extension under name."""
        pass
    
    @abstractmethod
    def run(self, program: str) -> Any:
        """Accept a runnable program and return a runtime handle."""
        pass
    
    def shutdown(self) -> None:
        """Release runtime resources."""
        pass


class EngineRuntime(BaseModel):
    """A program accepted by an in-memory engine manager."""
    
    runtime_id: str
    program: str
    extensions: List[str] = Field(default_factory=list)


class InMemoryEngineManager(EngineManager):
    """
    In-memory engine manager for development/testing.
    
    Records registered extensions and accepted programs without
    interpreting them.
    """
    
    def __init__(self):
        self._extensions: Dict[str, Any] = {}
        self._runtimes: Dict[str, EngineRuntime] = {}
        self._lock = threading.Lock()
        self._ids = IdentityGenerator()
    
    def register_extension(self, name: str, handle: Any) -> None:
        check_not_none(name, "name")
        check_not_none(handle, "handle")
        with self._lock:
            self._extensions[name] = handle
    
    def run(self, program: str) -> EngineRuntime:
        check_not_none(program, "program")
        with self._lock:
            runtime = EngineRuntime(
                runtime_id=self._ids.new_id(),
                program=program,
                extensions=list(self._extensions),
            )
            self._runtimes[runtime.runtime_id] = runtime
        logger.debug(f"Accepted program for runtime {runtime.runtime_id}")
        return runtime
    
    @property
    def extensions(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._extensions)
    
    @property
    def runtimes(self) -> List[EngineRuntime]:
        with self._lock:
            return list(self._runtimes.values())
    
    def shutdown(self) -> None:
        with self._lock:
            self._runtimes.clear()


class EngineFactory:
    """
    Builds engine managers with every registered extension applied.
    
    Extensions are taken from a snapshot at call time, so extensions
    merged afterwards never reach managers built earlier.
    
    Example:
        factory = EngineFactory(extensions)
        manager = factory.new_engine_manager()
        manager.run(program)
    """
    
    def __init__(
        self,
        extensions: ExtensionRegistry,
        manager_class: Optional[Callable[[], EngineManager]] = None,
    ):
        self.extensions = check_not_none(extensions, "extensions")
        self.manager_class = manager_class or InMemoryEngineManager
    
    def new_engine_manager(self) -> EngineManager:
        """Build a new, independent engine manager."""
        manager = self.manager_class()
        registered: Mapping[str, Any] = self.extensions.snapshot()
        for name, handle in registered.items():
            manager.register_extension(name, handle)
        
        logger.debug(f"Created {type(manager).__name__} with extensions {list(registered)}")
        return manager
