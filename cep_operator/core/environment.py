"""
Execution environment settings carried by an operator context.
"""

from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class ExecutionConfig(BaseModel):
    """
    Execution configuration of the hosting pipeline.
    
    The context treats its execution configuration as opaque; this model
    is the shape used when the configuration is declared in a file.
    """
    
    parallelism: int = Field(default=1, ge=1, description="Default parallelism of the operator")
    max_parallelism: Optional[int] = Field(default=None, ge=1, description="Upper bound for rescaling")
    auto_watermark_interval_ms: int = Field(default=200, ge=0, description="Watermark emission interval")
    object_reuse: bool = Field(default=False, description="Reuse event objects between operators")
    global_job_parameters: Dict[str, str] = Field(default_factory=dict, description="Job-wide parameters")
    
    model_config = ConfigDict(frozen=True)
