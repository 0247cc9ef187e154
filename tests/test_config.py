"""
Tests for settings and declarative context configuration.
"""

import logging
from collections import OrderedDict

import pytest

from cep_operator.config import (
    ContextConfig,
    EngineSettings,
    configure,
    configure_logging,
    get_settings,
)
from cep_operator.core.engine import InMemoryEngineManager
from cep_operator.core.enums import TimeCharacteristic
from cep_operator.core.environment import ExecutionConfig
from cep_operator.core.exceptions import (
    ContextConfigError,
    ExtensionLoadError,
    PreconditionUnsetError,
)


CONFIG_YAML = """
name: stocks
time_characteristic: event_time
execution_config:
  parallelism: 4
streams:
  StockStream:
    - {name: symbol, type: string}
    - {name: price, type: double}
extensions:
  util:ordered: collections:OrderedDict
plans:
  - from StockStream[price > 10] select symbol insert into Expensive;
  - id: cheap
    body: from StockStream[price <= 10] select symbol insert into Cheap;
"""


class TestEngineSettings:
    """Tests for EngineSettings."""
    
    def setup_method(self):
        configure(None)
    
    def test_defaults(self):
        """Test default settings values."""
        settings = EngineSettings()
        
        assert settings.engine_name == "cep_operator"
        assert settings.unnamed_label == "Unnamed"
        assert settings.default_time_characteristic is None
        assert settings.default_parallelism == 1
    
    def test_env_override(self, monkeypatch):
        """Test reading settings from CEP_ environment variables."""
        monkeypatch.setenv("CEP_UNNAMED_LABEL", "CEP")
        monkeypatch.setenv("CEP_DEFAULT_TIME_CHARACTERISTIC", "ingestion_time")
        
        settings = EngineSettings()
        
        assert settings.unnamed_label == "CEP"
        assert settings.default_time_characteristic is TimeCharacteristic.INGESTION_TIME
    
    def test_global_settings(self):
        """Test the global settings accessors."""
        settings = EngineSettings(debug=True)
        configure(settings)
        
        assert get_settings() is settings
    
    def test_configure_logging(self):
        """Test applying the log level to the package logger."""
        configure_logging(EngineSettings(log_level="warning"))
        assert logging.getLogger("cep_operator").level == logging.WARNING
        
        configure_logging(EngineSettings(debug=True))
        assert logging.getLogger("cep_operator").level == logging.DEBUG


class TestContextConfig:
    """Tests for ContextConfig."""
    
    def test_build_from_yaml(self):
        """Test building a fully configured context from YAML."""
        ctx = ContextConfig.from_yaml(CONFIG_YAML).build(EngineSettings())
        
        assert ctx.display_name() == f"stocks ({ctx.uuid})"
        assert ctx.get_time_characteristic() is TimeCharacteristic.EVENT_TIME
        assert ctx.get_execution_config() == ExecutionConfig(parallelism=4)
        assert ctx.get_input_streams() == ["StockStream"]
        assert ctx.get_extensions()["util:ordered"] is OrderedDict
        
        plans = ctx.get_execution_plan_map()
        assert len(plans) == 2
        assert plans["cheap"] == "from StockStream[price <= 10] select symbol insert into Cheap;"
        assert ctx.assemble_one("cheap") == (
            "define stream StockStream (symbol string, price double);"
            "from StockStream[price <= 10] select symbol insert into Cheap;"
        )
    
    def test_settings_defaults_applied(self):
        """Test defaults taken from settings when the config declares none."""
        settings = EngineSettings(
            unnamed_label="CEP",
            default_time_characteristic="processing_time",
            default_parallelism=3,
        )
        
        ctx = ContextConfig().build(settings)
        
        assert ctx.display_name() == f"CEP ({ctx.uuid})"
        assert ctx.get_time_characteristic() is TimeCharacteristic.PROCESSING_TIME
        assert ctx.get_execution_config().parallelism == 3
    
    def test_empty_config_leaves_unset_values(self):
        """Test that values without a default still fail fast."""
        ctx = ContextConfig().build(EngineSettings())
        
        with pytest.raises(PreconditionUnsetError):
            ctx.get_time_characteristic()
        with pytest.raises(PreconditionUnsetError):
            ctx.assemble_all()
    
    def test_context_kwargs_passed(self):
        """Test passing context arguments through build."""
        ctx = ContextConfig().build(EngineSettings(), engine_manager_class=InMemoryEngineManager)
        
        assert isinstance(ctx.new_engine_manager(), InMemoryEngineManager)
    
    def test_invalid_config_fails(self):
        """Test that invalid field values raise ContextConfigError."""
        with pytest.raises(ContextConfigError):
            ContextConfig.from_dict({"time_characteristic": "wall_clock"})
        with pytest.raises(ContextConfigError):
            ContextConfig.from_dict({"streams": {"A": [{"name": "x", "type": "decimal"}]}})
    
    def test_non_mapping_fails(self):
        """Test that a YAML document that is not a mapping is rejected."""
        with pytest.raises(ContextConfigError):
            ContextConfig.from_yaml("- just\n- a list\n")
    
    def test_invalid_yaml_fails(self):
        """Test that malformed YAML raises ContextConfigError."""
        with pytest.raises(ContextConfigError):
            ContextConfig.from_yaml("name: [unclosed")
    
    def test_bad_extension_path_fails(self):
        """Test that an unimportable extension fails while building."""
        config = ContextConfig(extensions={"broken": "no_such_module_for_tests:Thing"})
        
        with pytest.raises(ExtensionLoadError):
            config.build(EngineSettings())
    
    def test_from_file(self, tmp_path):
        """Test loading a config file."""
        path = tmp_path / "context.yaml"
        path.write_text(CONFIG_YAML, encoding="utf-8")
        
        config = ContextConfig.from_file(path)
        
        assert config.name == "stocks"
        assert len(config.plans) == 2
    
    def test_missing_file_fails(self, tmp_path):
        """Test loading a config file that does not exist."""
        with pytest.raises(ContextConfigError):
            ContextConfig.from_file(tmp_path / "missing.yaml")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
