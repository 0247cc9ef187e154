"""
Stream schema definitions for the CEP operator context.

A schema describes the field layout of one input stream and renders the
stream definition text that precedes execution plans.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import AttributeType, ATTRIBUTE_TYPE_ALIASES


@runtime_checkable
class StreamDefinitionRenderer(Protocol):
    """Anything that can render its own stream definition text."""
    
    def render_definition(self, stream_id: str) -> str:
        ...


class SchemaField(BaseModel):
    """Definition of a single attribute of a stream."""
    
    name: str = Field(..., description="Attribute name")
    type: AttributeType = Field(..., description="Attribute type")
    description: Optional[str] = Field(default=None, description="Attribute description")
    
    model_config = ConfigDict(frozen=True)
    
    @field_validator("type", mode="before")
    @classmethod
    def _resolve_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            return ATTRIBUTE_TYPE_ALIASES.get(lowered, lowered)
        return value


class StreamSchema(BaseModel):
    """
    Ordered field layout of one input stream.
    
    Renders definitions of the form:
        define stream InputStream (id string, price double);
    
    Example:
        schema = StreamSchema.of(id="string", price="double")
        schema.render_definition("InputStream")
    """
    
    fields: List[SchemaField] = Field(default_factory=list, description="Ordered attributes")
    
    model_config = ConfigDict(frozen=True)
    
    @classmethod
    def of(cls, **attributes: Any) -> "StreamSchema":
        """Build a schema from keyword name=type pairs, in argument order."""
        return cls(fields=[SchemaField(name=k, type=v) for k, v in attributes.items()])
    
    @classmethod
    def from_fields(cls, fields: List[Dict[str, Any]]) -> "StreamSchema":
        """Build a schema from a list of {name, type} dictionaries."""
        return cls(fields=[SchemaField.model_validate(f) for f in fields])
    
    @property
    def field_names(self) -> List[str]:
        """Attribute names in declaration order."""
        return [f.name for f in self.fields]
    
    def field_index(self, name: str) -> int:
        """
        Position of an attribute in the stream definition.
        
        Raises:
            KeyError: If the attribute is not part of the schema
        """
        for index, f in enumerate(self.fields):
            if f.name == name:
                return index
        raise KeyError(name)
    
    def render_definition(self, stream_id: str) -> str:
        """Render the stream definition statement, terminator included."""
        attributes = ", ".join(f"{f.name} {f.type.value}" for f in self.fields)
        return f"define stream {stream_id} ({attributes});"
