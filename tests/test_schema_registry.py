"""
Tests for stream schemas and the Schema Registry.
"""

import pytest
from pydantic import ValidationError

from cep_operator.core.enums import AttributeType
from cep_operator.core.exceptions import NullArgumentError, UndefinedStreamError
from cep_operator.core.schema import SchemaField, StreamDefinitionRenderer, StreamSchema
from cep_operator.core.schema_registry import SchemaRegistry


class FixedSchema:
    """Schema stub rendering a fixed definition."""
    
    def __init__(self, definition: str):
        self.definition = definition
    
    def render_definition(self, stream_id: str) -> str:
        return self.definition


class TestStreamSchema:
    """Tests for StreamSchema."""
    
    def test_render_definition(self):
        """Test rendering a stream definition statement."""
        schema = StreamSchema.of(symbol="string", price="double", volume="long")
        
        assert schema.render_definition("StockStream") == (
            "define stream StockStream (symbol string, price double, volume long);"
        )
    
    def test_type_aliases(self):
        """Test that common type names are accepted."""
        schema = StreamSchema.of(name="str", count="integer", active="boolean", payload="any")
        
        assert [f.type for f in schema.fields] == [
            AttributeType.STRING,
            AttributeType.INT,
            AttributeType.BOOL,
            AttributeType.OBJECT,
        ]
    
    def test_unknown_type_fails(self):
        """Test that an unknown attribute type is rejected."""
        with pytest.raises(ValidationError):
            SchemaField(name="x", type="decimal")
    
    def test_from_fields(self):
        """Test building a schema from field dictionaries."""
        schema = StreamSchema.from_fields([
            {"name": "id", "type": "string"},
            {"name": "value", "type": "float"},
        ])
        
        assert schema.field_names == ["id", "value"]
        assert schema.field_index("value") == 1
    
    def test_field_index_unknown(self):
        """Test looking up an attribute that does not exist."""
        with pytest.raises(KeyError):
            StreamSchema.of(id="string").field_index("missing")
    
    def test_is_renderer(self):
        """Test that schemas satisfy the renderer protocol."""
        assert isinstance(StreamSchema.of(id="string"), StreamDefinitionRenderer)
        assert isinstance(FixedSchema("x;"), StreamDefinitionRenderer)


class TestSchemaRegistry:
    """Tests for SchemaRegistry."""
    
    def setup_method(self):
        self.registry = SchemaRegistry()
    
    def test_get_returns_registered_schema(self):
        """Test that get returns exactly the registered schema."""
        a = StreamSchema.of(id="string")
        b = FixedSchema("defB;")
        self.registry.replace_all({"A": a, "B": b})
        
        assert self.registry.get("A") is a
        assert self.registry.get("B") is b
    
    def test_get_unregistered_fails(self):
        """Test that an unknown stream id raises UndefinedStreamError."""
        self.registry.replace_all({"A": FixedSchema("defA;")})
        
        with pytest.raises(UndefinedStreamError) as exc:
            self.registry.get("Missing")
        
        assert exc.value.stream_id == "Missing"
    
    def test_get_none_fails(self):
        """Test that a None stream id is rejected."""
        with pytest.raises(NullArgumentError):
            self.registry.get(None)
    
    def test_replace_all_replaces_everything(self):
        """Test that replace_all drops streams missing from the new mapping."""
        self.registry.replace_all({"A": FixedSchema("defA;")})
        self.registry.replace_all({"B": FixedSchema("defB;")})
        
        assert self.registry.list_stream_ids() == ["B"]
        assert "A" not in self.registry
    
    def test_replace_all_none_fails(self):
        """Test that a None mapping is rejected without mutation."""
        self.registry.replace_all({"A": FixedSchema("defA;")})
        
        with pytest.raises(NullArgumentError):
            self.registry.replace_all(None)
        
        assert self.registry.list_stream_ids() == ["A"]
    
    def test_replace_all_none_schema_fails(self):
        """Test that a None schema is rejected without partial mutation."""
        self.registry.replace_all({"A": FixedSchema("defA;")})
        
        with pytest.raises(NullArgumentError):
            self.registry.replace_all({"B": FixedSchema("defB;"), "C": None})
        
        assert self.registry.list_stream_ids() == ["A"]
    
    def test_replace_all_copies_mapping(self):
        """Test that later changes to the caller's mapping are not seen."""
        mapping = {"A": FixedSchema("defA;")}
        self.registry.replace_all(mapping)
        mapping["B"] = FixedSchema("defB;")
        
        assert self.registry.list_stream_ids() == ["A"]
    
    def test_order_is_stable(self):
        """Test that registration order is kept."""
        self.registry.replace_all({
            "Zeta": FixedSchema("z;"),
            "Alpha": FixedSchema("a;"),
            "Mid": FixedSchema("m;"),
        })
        
        assert self.registry.list_stream_ids() == ["Zeta", "Alpha", "Mid"]
        assert list(self.registry) == ["Zeta", "Alpha", "Mid"]
        assert self.registry.render_definitions() == "z;a;m;"
    
    def test_copy_is_independent(self):
        """Test that a copy keeps its own mapping."""
        self.registry.replace_all({"A": FixedSchema("defA;")})
        clone = self.registry.copy()
        self.registry.replace_all({})
        
        assert clone.list_stream_ids() == ["A"]
        assert len(self.registry) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
