"""
CEP Operator Exception Hierarchy.

Centralized exception definitions for consistent error handling.
"""

from typing import Any


class CEPOperatorError(Exception):
    """Base exception for all CEP operator context errors."""
    
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# -----------------------------------------------------------------------------
# Argument Errors
# -----------------------------------------------------------------------------

class NullArgumentError(CEPOperatorError):
    """Raised when a required argument is None."""
    
    def __init__(self, argument: str):
        super().__init__(
            f"Required argument '{argument}' must not be None",
            {"argument": argument}
        )
        self.argument = argument


def check_not_none(value: Any, argument: str) -> Any:
    """
    Return value unchanged, or raise NullArgumentError if it is None.
    
    Args:
        value: Value to check
        argument: Argument name reported in the error
    """
    if value is None:
        raise NullArgumentError(argument)
    return value


# -----------------------------------------------------------------------------
# Stream Errors
# -----------------------------------------------------------------------------

class UndefinedStreamError(CEPOperatorError):
    """Raised when a stream id is not registered."""
    
    def __init__(self, stream_id: str, message: str = None):
        super().__init__(
            message or f"Input stream: {stream_id} is not found",
            {"stream_id": stream_id}
        )
        self.stream_id = stream_id


class UndefinedExecutionPlanError(UndefinedStreamError):
    """Raised when an execution plan id is not registered."""
    
    def __init__(self, plan_id: str):
        super().__init__(plan_id, f"Execution plan: {plan_id} is not found")
        self.details = {"plan_id": plan_id}
        self.plan_id = plan_id


# -----------------------------------------------------------------------------
# Configuration Errors
# -----------------------------------------------------------------------------

class PreconditionUnsetError(CEPOperatorError):
    """Raised when a required value is read before it was configured."""
    
    def __init__(self, field_name: str):
        super().__init__(
            f"{field_name} is not set",
            {"field": field_name}
        )
        self.field_name = field_name


class ContextConfigError(CEPOperatorError):
    """Raised when a declarative context configuration is invalid."""
    pass


# -----------------------------------------------------------------------------
# Extension Errors
# -----------------------------------------------------------------------------

class ExtensionLoadError(CEPOperatorError):
    """Raised when an extension import path cannot be resolved."""
    
    def __init__(self, name: str, path: str, reason: str):
        super().__init__(
            f"Failed to load extension '{name}' from '{path}': {reason}",
            {"extension": name, "path": path}
        )
        self.name = name
        self.path = path
