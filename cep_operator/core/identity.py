"""
Identity generation for contexts and execution plans.
"""

import uuid
from typing import Callable, Optional


class IdentityGenerator:
    """
    Produces collision-resistant text identifiers.
    
    Defaults to random (version 4) UUIDs rendered as text. A custom
    source can be injected for deterministic tests.
    
    Example:
        ids = IdentityGenerator()
        plan_id = ids.new_id()
    """
    
    def __init__(self, source: Optional[Callable[[], str]] = None):
        self._source = source
    
    def new_id(self) -> str:
        """Generate a fresh identifier."""
        if self._source is not None:
            return self._source()
        return str(uuid.uuid4())
    
    def __call__(self) -> str:
        return self.new_id()
    
    def __getstate__(self):
        # Injected sources do not travel to workers.
        return {"_source": None}


_default_generator = IdentityGenerator()


def new_id() -> str:
    """Generate an identifier from the default generator."""
    return _default_generator.new_id()
