"""
Execution Plan Registry.

Concurrency-safe store of named execution plans. Plans may be added,
updated or removed from a control path while worker threads iterate the
registry to rebuild a running engine.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import check_not_none
from .identity import IdentityGenerator


class ExecutionPlan(BaseModel):
    """A named query program."""
    
    id: str = Field(..., description="Plan id, unique within a context")
    body: str = Field(..., description="Query program text")
    
    model_config = ConfigDict(frozen=True)


class PlanRegistry:
    """
    Plan id to plan body mapping guarded by a lock.
    
    Every mutation and every read takes the lock, so callers never need
    an external one. Reads hand out point-in-time copies, never the
    live mapping.
    
    The registry counts as initialized once the first plan was stored
    (or ``initialize`` was called); removing plans does not reset it.
    Iteration follows first-insertion order; updating a plan keeps its
    position.
    
    Example:
        plans = PlanRegistry()
        plan_id = plans.add("from InputStream select * insert into OutputStream;")
        plans.update(plan_id, "from InputStream[price > 10] select * insert into OutputStream;")
        plans.remove(plan_id)
    """
    
    def __init__(self, id_generator: Optional[IdentityGenerator] = None):
        self._plans: Dict[str, str] = {}
        self._lock = threading.RLock()
        self._initialized = False
        self._ids = id_generator or IdentityGenerator()
    
    @property
    def initialized(self) -> bool:
        """Whether plans were ever stored in this registry."""
        return self._initialized
    
    def initialize(self) -> None:
        """Mark the registry initialized without storing a plan."""
        with self._lock:
            self._initialized = True
    
    @contextmanager
    def locked(self) -> Iterator["PlanRegistry"]:
        """
        Hold the registry lock across several calls.
        
        The lock is re-entrant, so registry methods may be called inside
        the block. Keep the block short; workers reading plans wait on it.
        
        Example:
            with plans.locked():
                plans.add(body)
                size = len(plans)
        """
        with self._lock:
            yield self
    
    def add(self, body: str, plan_id: Optional[str] = None) -> str:
        """
        Store a plan, generating an id unless one is supplied.
        
        With an explicit plan_id this is identical to ``update``.
        
        Args:
            body: Plan text
            plan_id: Optional id; an existing plan under it is overwritten
            
        Returns:
            The plan id
            
        Raises:
            NullArgumentError: If body is None
        """
        check_not_none(body, "executionPlan")
        
        with self._lock:
            if plan_id is None:
                plan_id = self._ids.new_id()
                while plan_id in self._plans:
                    plan_id = self._ids.new_id()
            self._plans[plan_id] = body
            self._initialized = True
        return plan_id
    
    def update(self, plan_id: str, body: str) -> None:
        """
        Store or overwrite the plan under plan_id.
        
        Raises:
            NullArgumentError: If plan_id or body is None
        """
        check_not_none(plan_id, "id")
        self.add(body, plan_id=plan_id)
    
    def remove(self, plan_id: str) -> bool:
        """
        Remove a plan.
        
        Returns:
            True if a plan was registered under plan_id, else False
        """
        with self._lock:
            return self._plans.pop(plan_id, None) is not None
    
    def get(self, plan_id: str) -> Optional[str]:
        """Get a plan body, or None if plan_id is not registered."""
        with self._lock:
            return self._plans.get(plan_id)
    
    def list_all(self) -> Dict[str, str]:
        """Get a copy of the plan id to body mapping."""
        with self._lock:
            return dict(self._plans)
    
    def ids(self) -> List[str]:
        """Get registered plan ids."""
        with self._lock:
            return list(self._plans.keys())
    
    def plans(self) -> List[ExecutionPlan]:
        """Get registered plans as value objects."""
        return [ExecutionPlan(id=k, body=v) for k, v in self.list_all().items()]
    
    def copy(self) -> "PlanRegistry":
        """Copy the registry into an independent registry with its own lock."""
        clone = PlanRegistry(id_generator=self._ids)
        with self._lock:
            clone._plans = dict(self._plans)
            clone._initialized = self._initialized
        return clone
    
    def __getstate__(self):
        with self._lock:
            return {
                "plans": dict(self._plans),
                "initialized": self._initialized,
            }
    
    def __setstate__(self, state):
        self._plans = state["plans"]
        self._initialized = state["initialized"]
        self._lock = threading.RLock()
        self._ids = IdentityGenerator()
    
    def __contains__(self, plan_id: str) -> bool:
        with self._lock:
            return plan_id in self._plans
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._plans)
    
    def __repr__(self) -> str:
        return f"PlanRegistry(plans={self.ids()})"
