"""Domain services"""

from domain.services.command_execution_service import ICommandSession, CommandExecutionResult
from domain.services.metrics_backend import IMetricsBackend
from domain.services.process_ranking import (
    build_rankings,
    is_monitoring_noise,
    rank_entries,
)

__all__ = [
    "ICommandSession",
    "CommandExecutionResult",
    "IMetricsBackend",
    "build_rankings",
    "is_monitoring_noise",
    "rank_entries",
]
