"""
CEP Operator v1.0

Operator context for running an embedded complex event processing engine
inside the parallel workers of a stream-processing pipeline.
"""

__version__ = "1.0.0"

from .core.context import OperatorContext
from .core.schema import StreamSchema
from .core.engine import EngineFactory, InMemoryEngineManager
from .core.enums import TimeCharacteristic
from .core.environment import ExecutionConfig
from .config import ContextConfig, EngineSettings, get_settings

__all__ = [
    # Core
    "OperatorContext",
    "StreamSchema",
    "EngineFactory",
    "InMemoryEngineManager",
    "TimeCharacteristic",
    "ExecutionConfig",
    # Configuration
    "ContextConfig",
    "EngineSettings",
    "get_settings",
]
