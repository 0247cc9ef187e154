"""
Core components of the CEP operator context.
"""

from .context import OperatorContext
from .identity import IdentityGenerator, new_id
from .schema import SchemaField, StreamSchema, StreamDefinitionRenderer
from .schema_registry import SchemaRegistry
from .extension_registry import ExtensionRegistry
from .plan_registry import ExecutionPlan, PlanRegistry
from .planner import ExecutionPlanner, Planner, enrich_plan
from .assembler import PlanAssembler
from .engine import EngineFactory, EngineManager, EngineRuntime, InMemoryEngineManager
from .environment import ExecutionConfig

# Observability
from .metrics import (
    MetricsCollector,
    get_metrics,
    StructuredLogger,
    get_logger,
)

# Exceptions
from .exceptions import (
    CEPOperatorError,
    NullArgumentError,
    UndefinedStreamError,
    UndefinedExecutionPlanError,
    PreconditionUnsetError,
    ContextConfigError,
    ExtensionLoadError,
    check_not_none,
)

# Enums
from .enums import AttributeType, TimeCharacteristic

__all__ = [
    # Core
    "OperatorContext",
    "IdentityGenerator",
    "new_id",
    "SchemaField",
    "StreamSchema",
    "StreamDefinitionRenderer",
    "SchemaRegistry",
    "ExtensionRegistry",
    "ExecutionPlan",
    "PlanRegistry",
    "ExecutionPlanner",
    "Planner",
    "enrich_plan",
    "PlanAssembler",
    "EngineFactory",
    "EngineManager",
    "EngineRuntime",
    "InMemoryEngineManager",
    "ExecutionConfig",
    # Observability
    "MetricsCollector",
    "get_metrics",
    "StructuredLogger",
    "get_logger",
    # Exceptions
    "CEPOperatorError",
    "NullArgumentError",
    "UndefinedStreamError",
    "UndefinedExecutionPlanError",
    "PreconditionUnsetError",
    "ContextConfigError",
    "ExtensionLoadError",
    "check_not_none",
    # Enums
    "AttributeType",
    "TimeCharacteristic",
]
