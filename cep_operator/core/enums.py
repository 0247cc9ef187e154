"""
Centralized Enum Definitions.

Shared enumerations used across the context, schemas and configuration.
"""

from enum import Enum


# -----------------------------------------------------------------------------
# Time Characteristic
# -----------------------------------------------------------------------------

class TimeCharacteristic(str, Enum):
    """
    Notion of time the hosting pipeline uses for windows and timers.
    
    Used by: OperatorContext, EngineSettings, ContextConfig
    """
    PROCESSING_TIME = "processing_time"  # Wall clock of the worker
    INGESTION_TIME = "ingestion_time"    # Time the event entered the pipeline
    EVENT_TIME = "event_time"            # Timestamp carried by the event


# -----------------------------------------------------------------------------
# Attribute Types
# -----------------------------------------------------------------------------

class AttributeType(str, Enum):
    """
    Attribute types understood by stream definitions.
    
    Used by: SchemaField, StreamSchema
    """
    STRING = "string"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BOOL = "bool"
    OBJECT = "object"


# Aliases for common type representations
ATTRIBUTE_TYPE_ALIASES = {
    "str": AttributeType.STRING,
    "text": AttributeType.STRING,
    "integer": AttributeType.INT,
    "boolean": AttributeType.BOOL,
    "any": AttributeType.OBJECT,
}
