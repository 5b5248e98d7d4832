"""
Pipeline module.

The pipeline orchestrates the processing flow:
- Frame acquisition from observation sources
- Single-flight dispatch to the selected inference model
- Hand-off of observations to the result reporter
"""

from .dispatcher import DispatchStats, InferenceDispatcher
from .engine import PipelineEngine, PipelineStats, create_engine_from_config

__all__ = [
    "DispatchStats",
    "InferenceDispatcher",
    "PipelineEngine",
    "PipelineStats",
    "create_engine_from_config",
]
