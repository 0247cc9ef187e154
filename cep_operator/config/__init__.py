"""
CEP Operator Configuration.

Settings and declarative context configuration.
"""

import logging

from cep_operator.config.settings import EngineSettings, get_settings, configure
from cep_operator.config.context_config import ContextConfig, PlanDeclaration


def configure_logging(settings: EngineSettings = None) -> None:
    """Apply the configured log level to the package logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.getLogger("cep_operator").setLevel(level)


__all__ = [
    "EngineSettings",
    "get_settings",
    "configure",
    "configure_logging",
    "ContextConfig",
    "PlanDeclaration",
]
