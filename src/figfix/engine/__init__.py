"""Pipeline engine: configuration, pass plan and the runner."""

from figfix.engine.config import (
    ConfigError,
    PassSettings,
    PipelineConfig,
    load_config,
    parse_priority_override,
)
from figfix.engine.registry import PassPlan, PassRegistry, PlannedPass
from figfix.engine.pipeline import PassError, Pipeline, PipelineResult, process_file

__all__ = [
    "ConfigError",
    "PassSettings",
    "PipelineConfig",
    "load_config",
    "parse_priority_override",
    "PassPlan",
    "PassRegistry",
    "PlannedPass",
    "PassError",
    "Pipeline",
    "PipelineResult",
    "process_file",
]
