"""
Declarative Context Configuration.

Describes an operator context in a dictionary or YAML document and builds
the configured context from it.

Example YAML:
    name: fraud-detection
    time_characteristic: event_time
    execution_config:
      parallelism: 4
    streams:
      TxStream:
        - {name: card, type: string}
        - {name: amount, type: double}
    extensions:
      custom:risk: my_extensions.functions:RiskScore
    plans:
      - from TxStream[amount > 1000] select card insert into Alerts;
      - id: velocity
        body: from TxStream#window.time(1 min) select card, count() as n group by card insert into Velocity;
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from cep_operator.config.settings import EngineSettings, get_settings
from cep_operator.core.context import OperatorContext
from cep_operator.core.enums import TimeCharacteristic
from cep_operator.core.environment import ExecutionConfig
from cep_operator.core.exceptions import ContextConfigError
from cep_operator.core.schema import SchemaField, StreamSchema
from cep_operator.utils.imports import ImportPath


logger = logging.getLogger(__name__)


class PlanDeclaration(BaseModel):
    """An execution plan with an optional fixed id."""
    
    id: Optional[str] = Field(default=None, description="Plan id; generated when omitted")
    body: str = Field(..., description="Plan text")


class ContextConfig(BaseModel):
    """Declarative description of an operator context."""
    
    name: Optional[str] = Field(default=None, description="Operator name")
    time_characteristic: Optional[TimeCharacteristic] = Field(default=None)
    execution_config: Optional[ExecutionConfig] = Field(default=None)
    streams: Dict[str, List[SchemaField]] = Field(default_factory=dict, description="Input stream layouts")
    extensions: Dict[str, str] = Field(default_factory=dict, description="Extension name to import path")
    plans: List[Union[str, PlanDeclaration]] = Field(default_factory=list, description="Execution plans")
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContextConfig":
        """
        Create a config from a dictionary.
        
        Raises:
            ContextConfigError: If the dictionary is not a valid config
        """
        if not isinstance(data, dict):
            raise ContextConfigError(f"Context config must be a mapping, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ContextConfigError("Invalid context config", {"errors": e.errors()}) from e
    
    @classmethod
    def from_yaml(cls, yaml_content: str) -> "ContextConfig":
        """Create a config from a YAML string."""
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ContextConfigError(f"Invalid YAML: {e}") from e
        return cls.from_dict(data or {})
    
    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ContextConfig":
        """Create a config from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ContextConfigError(f"Config file not found: {path}")
        
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_yaml(f.read())
    
    def build(self, settings: Optional[EngineSettings] = None, **context_kwargs: Any) -> OperatorContext:
        """
        Build a configured operator context.
        
        Settings supply the unnamed label, and the time characteristic and
        parallelism when the config declares none.
        
        Args:
            settings: Settings to apply; the global settings by default
            **context_kwargs: Passed to OperatorContext (planner, engine_manager_class, ...)
        """
        settings = settings or get_settings()
        context_kwargs.setdefault("unnamed_label", settings.unnamed_label)
        context = OperatorContext(**context_kwargs)
        
        if self.name is not None:
            context.set_name(self.name)
        
        time_characteristic = self.time_characteristic or settings.default_time_characteristic
        if time_characteristic is not None:
            context.set_time_characteristic(time_characteristic)
        
        context.set_execution_config(
            self.execution_config or ExecutionConfig(parallelism=settings.default_parallelism)
        )
        
        context.set_input_stream_schemas({
            stream_id: StreamSchema(fields=fields) for stream_id, fields in self.streams.items()
        })
        
        if self.extensions:
            context.set_extensions({name: ImportPath(path) for name, path in self.extensions.items()})
        
        for plan in self.plans:
            if isinstance(plan, str):
                context.add_execution_plan(plan)
            else:
                context.add_execution_plan(plan.body, plan_id=plan.id)
        
        logger.info(f"Built context {context.display_name()} from config")
        return context
