"""
Plan Assembler.

Combines registered stream definitions and execution plans into the
program text handed to an engine manager.
"""

import logging
from typing import Optional

from .exceptions import PreconditionUnsetError, check_not_none
from .plan_registry import PlanRegistry
from .planner import ExecutionPlanner, Planner
from .schema_registry import SchemaRegistry


logger = logging.getLogger(__name__)


class PlanAssembler:
    """
    Assembles runnable programs from a schema and a plan registry.
    
    No separators are inserted between fragments: rendered stream
    definitions and plan bodies carry their own statement terminators.
    
    Example:
        assembler = PlanAssembler(schemas, plans)
        program = assembler.assemble_all()
    """
    
    def __init__(
        self,
        schemas: SchemaRegistry,
        plans: PlanRegistry,
        planner: Optional[Planner] = None,
    ):
        self.schemas = check_not_none(schemas, "inputStreamSchemas")
        self.plans = check_not_none(plans, "executionPlans")
        self.planner = planner or ExecutionPlanner()
    
    def _check_initialized(self) -> None:
        if not self.plans.initialized:
            raise PreconditionUnsetError("Execution plan")
    
    def assemble_all(self) -> str:
        """
        Every stream definition followed by every plan body.
        
        Returns:
            Concatenated program text
            
        Raises:
            PreconditionUnsetError: If no plan was ever registered
        """
        self._check_initialized()
        
        parts = [
            schema.render_definition(stream_id)
            for stream_id, schema in self.schemas.items()
        ]
        parts.extend(self.plans.list_all().values())
        
        logger.debug(f"Assembled {len(self.schemas)} stream definitions and {len(parts) - len(self.schemas)} plans")
        return "".join(parts)
    
    def assemble_one(self, plan_id: str) -> str:
        """
        One plan enriched with the stream definitions it needs.
        
        Args:
            plan_id: Id of the registered plan
            
        Returns:
            Program text produced by the planner
            
        Raises:
            PreconditionUnsetError: If no plan was ever registered
            UndefinedExecutionPlanError: If plan_id is not registered (raised by the planner)
            UndefinedStreamError: If the plan reads an unregistered stream
        """
        self._check_initialized()
        
        check_not_none(plan_id, "id")
        return self.planner.enrich(self.schemas, self.plans.get(plan_id), plan_id=plan_id)
