"""
Tests for the Extension Registry and import utilities.
"""

from collections import OrderedDict

import pytest

from cep_operator.core.exceptions import ExtensionLoadError, NullArgumentError
from cep_operator.core.extension_registry import ExtensionRegistry
from cep_operator.utils.imports import ImportPath, import_string


class PlusFunction:
    pass


class ConcatFunction:
    pass


class TestExtensionRegistry:
    """Tests for ExtensionRegistry."""
    
    def setup_method(self):
        self.registry = ExtensionRegistry()
    
    def test_merge_is_additive(self):
        """Test that merges keep entries not named again."""
        self.registry.merge({"a": 1})
        self.registry.merge({"b": 2})
        
        assert dict(self.registry.snapshot()) == {"a": 1, "b": 2}
    
    def test_merge_overwrites_colliding_names_only(self):
        """Test that only the colliding name is overwritten."""
        self.registry.merge({"a": 1})
        self.registry.merge({"b": 2})
        self.registry.merge({"a": 3})
        
        assert dict(self.registry.snapshot()) == {"a": 3, "b": 2}
    
    def test_merge_none_fails(self):
        """Test that a None mapping is rejected."""
        with pytest.raises(NullArgumentError):
            self.registry.merge(None)
    
    def test_merge_none_handle_fails_without_mutation(self):
        """Test that a None handle rejects the whole merge."""
        self.registry.merge({"a": 1})
        
        with pytest.raises(NullArgumentError):
            self.registry.merge({"b": 2, "c": None})
        
        assert self.registry.names() == ["a"]
    
    def test_snapshot_is_immutable(self):
        """Test that the snapshot cannot be written to."""
        self.registry.merge({"custom:plus": PlusFunction})
        snapshot = self.registry.snapshot()
        
        with pytest.raises(TypeError):
            snapshot["custom:concat"] = ConcatFunction
    
    def test_snapshot_detached_from_later_merges(self):
        """Test that merges after a snapshot are not visible through it."""
        self.registry.merge({"custom:plus": PlusFunction})
        snapshot = self.registry.snapshot()
        self.registry.merge({"custom:concat": ConcatFunction})
        
        assert list(snapshot) == ["custom:plus"]
        assert len(self.registry) == 2
    
    def test_merge_resolves_import_paths(self):
        """Test that ImportPath handles are imported at merge time."""
        self.registry.merge({
            "colon": ImportPath("collections:OrderedDict"),
            "dotted": ImportPath("collections.OrderedDict"),
        })
        
        assert self.registry.get("colon") is OrderedDict
        assert self.registry.get("dotted") is OrderedDict
    
    def test_merge_bad_import_path_fails(self):
        """Test that an unimportable path raises ExtensionLoadError."""
        with pytest.raises(ExtensionLoadError) as exc:
            self.registry.merge({"broken": ImportPath("no_such_module_for_tests:Thing")})
        
        assert exc.value.name == "broken"
        assert "broken" not in self.registry
    
    def test_plain_string_handle_is_opaque(self):
        """Test that a plain string handle is stored as given, even if it looks importable."""
        self.registry.merge({
            "label": "collections:OrderedDict",
            "sql": "SELECT 1",
        })
        
        assert self.registry.get("label") == "collections:OrderedDict"
        assert self.registry.get("label") is not OrderedDict
        assert self.registry.get("sql") == "SELECT 1"
    
    def test_copy_is_independent(self):
        """Test that a copy keeps its own mapping."""
        self.registry.merge({"a": 1})
        clone = self.registry.copy()
        self.registry.merge({"b": 2})
        
        assert clone.names() == ["a"]
    
    def test_repr(self):
        """Test registry string representation."""
        self.registry.merge({"a": 1})
        
        assert repr(self.registry) == "ExtensionRegistry(extensions=['a'])"


class TestImportString:
    """Tests for import_string."""
    
    def test_import_path_resolve(self):
        """Test that an ImportPath resolves to its target and stays a string."""
        path = ImportPath("collections:OrderedDict")
        
        assert path.resolve() is OrderedDict
        assert path == "collections:OrderedDict"
        assert repr(path) == "ImportPath('collections:OrderedDict')"
    
    def test_nested_attribute(self):
        """Test importing a nested attribute with colon syntax."""
        assert import_string("collections:OrderedDict.fromkeys") == OrderedDict.fromkeys
    
    def test_missing_attribute(self):
        """Test that a missing attribute raises ImportError."""
        with pytest.raises(ImportError):
            import_string("collections:NoSuchThing")
    
    def test_invalid_path(self):
        """Test that a path without a module raises ImportError."""
        with pytest.raises(ImportError):
            import_string("OrderedDict")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
