"""
Input Stream Schema Registry.

Maps stream ids to the schemas that render their definitions. The mapping
is populated while a job is configured and is read-only once the owning
context has been distributed to workers; writing to it afterwards is the
caller's responsibility and is not checked.
"""

import logging
from typing import Dict, Iterator, List, Mapping, Tuple

from .exceptions import NullArgumentError, UndefinedStreamError, check_not_none
from .schema import StreamDefinitionRenderer


logger = logging.getLogger(__name__)


class SchemaRegistry:
    """
    Registry of input stream schemas keyed by stream id.
    
    Iteration order is the order of the mapping handed to ``replace_all``,
    which keeps assembled programs stable across calls and across copies.
    
    Example:
        registry = SchemaRegistry()
        registry.replace_all({"StockStream": StreamSchema.of(symbol="string")})
        registry.get("StockStream").render_definition("StockStream")
    """
    
    def __init__(self):
        self._schemas: Dict[str, StreamDefinitionRenderer] = {}
    
    def replace_all(self, schemas: Mapping[str, StreamDefinitionRenderer]) -> None:
        """
        Replace the whole stream id to schema mapping.
        
        Args:
            schemas: Stream id to schema mapping
            
        Raises:
            NullArgumentError: If the mapping, a stream id or a schema is None
        """
        check_not_none(schemas, "inputStreamSchemas")
        
        replacement: Dict[str, StreamDefinitionRenderer] = {}
        for stream_id, schema in schemas.items():
            check_not_none(stream_id, "streamId")
            if schema is None:
                raise NullArgumentError(f"inputStreamSchemas[{stream_id}]")
            replacement[stream_id] = schema
        
        self._schemas = replacement
        logger.debug(f"Replaced input stream schemas: {list(replacement)}")
    
    def get(self, stream_id: str) -> StreamDefinitionRenderer:
        """
        Get the schema for a stream id.
        
        Raises:
            NullArgumentError: If stream_id is None
            UndefinedStreamError: If the stream was never registered
        """
        check_not_none(stream_id, "inputStreamId")
        
        if stream_id not in self._schemas:
            raise UndefinedStreamError(stream_id)
        return self._schemas[stream_id]
    
    def list_stream_ids(self) -> List[str]:
        """Get registered stream ids in registration order."""
        return list(self._schemas.keys())
    
    def items(self) -> List[Tuple[str, StreamDefinitionRenderer]]:
        """Get (stream id, schema) pairs in registration order."""
        return list(self._schemas.items())
    
    def as_dict(self) -> Dict[str, StreamDefinitionRenderer]:
        """Get a copy of the stream id to schema mapping."""
        return dict(self._schemas)
    
    def render_definitions(self) -> str:
        """Concatenate the rendered definitions of every registered stream."""
        return "".join(
            schema.render_definition(stream_id) for stream_id, schema in self._schemas.items()
        )
    
    def copy(self) -> "SchemaRegistry":
        """Copy the registry into an independent mapping."""
        clone = SchemaRegistry()
        clone._schemas = dict(self._schemas)
        return clone
    
    def __contains__(self, stream_id: str) -> bool:
        return stream_id in self._schemas
    
    def __iter__(self) -> Iterator[str]:
        return iter(self.list_stream_ids())
    
    def __len__(self) -> int:
        return len(self._schemas)
    
    def __repr__(self) -> str:
        return f"SchemaRegistry(streams={self.list_stream_ids()})"
