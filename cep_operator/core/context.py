"""
CEP Operator Context.

Metadata a stream-processing worker needs to run an embedded CEP engine:
input stream schemas, execution plans, engine extensions, output bindings
and execution environment settings.

Lifecycle:
    1. CONFIGURING - one thread sets schemas, extensions, plans and the
       environment on a single context.
    2. RUNNING - the context (or a copy) is held by every parallel worker.
       Execution plans stay mutable and may change concurrently; schemas,
       extensions and environment settings are read-only. Writing them after
       distribution is the caller's responsibility and is not checked.
"""

import copy
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .assembler import PlanAssembler
from .engine import EngineFactory, EngineManager
from .enums import TimeCharacteristic
from .exceptions import PreconditionUnsetError, check_not_none
from .extension_registry import ExtensionRegistry
from .identity import IdentityGenerator
from .metrics import get_logger, get_metrics
from .plan_registry import PlanRegistry
from .planner import Planner
from .schema import StreamDefinitionRenderer
from .schema_registry import SchemaRegistry


log = get_logger(__name__)


class OperatorContext:
    """
    Per-operator context distributed to every parallel worker.
    
    The uuid identifies the logical operator: it is generated once and
    kept verbatim by ``copy`` and by pickling.
    
    Example:
        ctx = OperatorContext()
        ctx.set_name("fraud-detection")
        ctx.set_input_stream_schemas({"TxStream": StreamSchema.of(card="string", amount="double")})
        ctx.add_execution_plan("from TxStream[amount > 1000] select card insert into Alerts;")
        ctx.set_time_characteristic(TimeCharacteristic.EVENT_TIME)
    
        manager = ctx.new_engine_manager()
        manager.run(ctx.assemble_all())
    """
    
    def __init__(
        self,
        planner: Optional[Planner] = None,
        engine_manager_class: Optional[Callable[[], EngineManager]] = None,
        id_generator: Optional[IdentityGenerator] = None,
        unnamed_label: str = "Unnamed",
    ):
        self._ids = id_generator or IdentityGenerator()
        self._uuid = self._ids.new_id()
        self._name: Optional[str] = None
        self._unnamed_label = unnamed_label
        self._time_characteristic: Optional[TimeCharacteristic] = None
        self._execution_config: Any = None
        self._output_bindings: Dict[str, Any] = {}
    
        self._schemas = SchemaRegistry()
        self._extensions = ExtensionRegistry()
        self._plans = PlanRegistry(id_generator=self._ids)
        self._planner = planner
        self._engine_manager_class = engine_manager_class
    
    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------
    
    @property
    def uuid(self) -> str:
        return self._uuid
    
    @property
    def name(self) -> Optional[str]:
        return self._name
    
    def set_name(self, name: str) -> None:
        self._name = check_not_none(name, "name")
    
    def display_name(self) -> str:
        """Operator name for monitoring, e.g. "fraud-detection (<uuid>)"."""
        if self._name is None:
            return f"{self._unnamed_label} ({self._uuid})"
        return f"{self._name} ({self._uuid})"
    
    # -------------------------------------------------------------------------
    # Registries
    # -------------------------------------------------------------------------
    
    @property
    def schemas(self) -> SchemaRegistry:
        return self._schemas
    
    @property
    def extensions(self) -> ExtensionRegistry:
        return self._extensions
    
    @property
    def plans(self) -> PlanRegistry:
        return self._plans
    
    @property
    def assembler(self) -> PlanAssembler:
        return PlanAssembler(self._schemas, self._plans, self._planner)
    
    @property
    def engine_factory(self) -> EngineFactory:
        return EngineFactory(self._extensions, self._engine_manager_class)
    
    # -------------------------------------------------------------------------
    # Input Streams
    # -------------------------------------------------------------------------
    
    def set_input_stream_schemas(self, schemas: Mapping[str, StreamDefinitionRenderer]) -> None:
        self._schemas.replace_all(schemas)
        log.info("Input stream schemas set", context=self._uuid, streams=self._schemas.list_stream_ids())
    
    def get_input_stream_schemas(self) -> Dict[str, StreamDefinitionRenderer]:
        return self._schemas.as_dict()
    
    def get_input_stream_schema(self, stream_id: str) -> StreamDefinitionRenderer:
        """
        Raises:
            UndefinedStreamError: If the stream is not defined
        """
        return self._schemas.get(stream_id)
    
    def get_input_streams(self) -> List[str]:
        return self._schemas.list_stream_ids()
    
    # -------------------------------------------------------------------------
    # Extensions
    # -------------------------------------------------------------------------
    
    def set_extensions(self, extensions: Mapping[str, Any]) -> None:
        """Merge extensions; only colliding names are overwritten."""
        self._extensions.merge(extensions)
    
    def get_extensions(self) -> Mapping[str, Any]:
        return self._extensions.snapshot()
    
    def new_engine_manager(self) -> EngineManager:
        """Build a fresh engine manager with every registered extension."""
        manager = self.engine_factory.new_engine_manager()
        get_metrics().record_engine_created(self._uuid)
        return manager
    
    create_engine_manager = new_engine_manager
    
    # -------------------------------------------------------------------------
    # Execution Plans
    # -------------------------------------------------------------------------
    
    def add_execution_plan(self, body: str, plan_id: Optional[str] = None) -> str:
        """
        Register a plan, generating its id unless one is given.
    
        Returns:
            The plan id
        """
        with self._plans.locked():
            plan_id = self._plans.add(body, plan_id=plan_id)
            get_metrics().record_plan_added(self._uuid, len(self._plans))
        log.debug("Execution plan stored", context=self._uuid, plan_id=plan_id)
        return plan_id
    
    def update_execution_plan(self, plan_id: str, body: str) -> None:
        """Store or overwrite the plan under plan_id."""
        check_not_none(plan_id, "id")
        self.add_execution_plan(body, plan_id=plan_id)
    
    def remove_execution_plan(self, plan_id: str) -> bool:
        with self._plans.locked():
            removed = self._plans.remove(plan_id)
            if removed:
                get_metrics().record_plan_removed(self._uuid, len(self._plans))
        if removed:
            log.debug("Execution plan removed", context=self._uuid, plan_id=plan_id)
        return removed
    
    def get_execution_plan_map(self) -> Dict[str, str]:
        """
        Raises:
            PreconditionUnsetError: If no plan was ever registered
        """
        if not self._plans.initialized:
            raise PreconditionUnsetError("Execution plan")
        return self._plans.list_all()
    
    def assemble_all(self) -> str:
        """Every stream definition followed by every plan body."""
        program = self.assembler.assemble_all()
        get_metrics().record_assembly(self._uuid, "all")
        return program
    
    def assemble_one(self, plan_id: str) -> str:
        """One plan enriched with the stream definitions it reads."""
        program = self.assembler.assemble_one(plan_id)
        get_metrics().record_assembly(self._uuid, "one")
        return program
    
    get_all_enriched_execution_plan = assemble_all
    get_enriched_execution_plan = assemble_one
    
    # -------------------------------------------------------------------------
    # Output Streams
    # -------------------------------------------------------------------------
    
    def set_output_binding(self, stream_id: str, type_descriptor: Any) -> None:
        check_not_none(stream_id, "outputStreamId")
        check_not_none(type_descriptor, "outputStreamType")
        self._output_bindings[stream_id] = type_descriptor
    
    def get_output_binding(self, stream_id: str) -> Optional[Any]:
        """Type descriptor bound to an output stream, or None."""
        return self._output_bindings.get(stream_id)
    
    def get_output_bindings(self) -> Dict[str, Any]:
        return dict(self._output_bindings)
    
    # -------------------------------------------------------------------------
    # Environment
    # -------------------------------------------------------------------------
    
    def set_time_characteristic(self, time_characteristic: Union[TimeCharacteristic, str]) -> None:
        check_not_none(time_characteristic, "timeCharacteristic")
        self._time_characteristic = TimeCharacteristic(time_characteristic)
    
    def get_time_characteristic(self) -> TimeCharacteristic:
        """
        Raises:
            PreconditionUnsetError: If the time characteristic was never set
        """
        if self._time_characteristic is None:
            raise PreconditionUnsetError("timeCharacteristic")
        return self._time_characteristic
    
    def set_execution_config(self, execution_config: Any) -> None:
        self._execution_config = check_not_none(execution_config, "executionConfig")
    
    def get_execution_config(self) -> Any:
        """
        Raises:
            PreconditionUnsetError: If the execution config was never set
        """
        if self._execution_config is None:
            raise PreconditionUnsetError("executionConfig")
        return self._execution_config
    
    # -------------------------------------------------------------------------
    # Distribution
    # -------------------------------------------------------------------------
    
    def copy(self) -> "OperatorContext":
        """
        Snapshot of the context for a parallel worker.
    
        - uuid, name and environment settings are copied verbatim
        - schemas, extensions and output bindings get new mappings
          holding the same (read-only) schema and handle objects
        - plans are copied into a new registry with its own lock
        """
        clone = copy.copy(self)
        clone._schemas = self._schemas.copy()
        clone._extensions = self._extensions.copy()
        clone._plans = self._plans.copy()
        clone._output_bindings = dict(self._output_bindings)
        return clone
    
    def to_dict(self) -> Dict[str, Any]:
        """Summary for monitoring and job inspection."""
        return {
            "uuid": self._uuid,
            "name": self._name,
            "display_name": self.display_name(),
            "time_characteristic": (
                self._time_characteristic.value if self._time_characteristic else None
            ),
            "input_streams": self._schemas.list_stream_ids(),
            "extensions": self._extensions.names(),
            "execution_plans": self._plans.ids(),
            "output_streams": list(self._output_bindings),
        }
    
    def close(self) -> None:
        """
        Release the metric series recorded for this operator.
        
        Copies share the uuid, so call this once the logical operator is
        discarded, not when a single worker copy goes away. Recording
        again afterwards starts fresh series.
        """
        removed = get_metrics().discard_context(self._uuid)
        log.debug("Operator context closed", context=self._uuid, series=removed)
    
    def __repr__(self) -> str:
        return f"OperatorContext({self.display_name()!r})"
