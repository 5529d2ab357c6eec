"""Observability utilities: log context, structured logging and operation metrics."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .logging_config import get_logger


@dataclass
class LogContext:
    """Context information attached to the log lines of one operation."""

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        """Create new context with operation set."""
        return LogContext(
            correlation_id=self.correlation_id,
            operation=operation,
            component=self.component,
            metadata=self.metadata.copy(),
        )

    def with_metadata(self, **kwargs: Any) -> "LogContext":
        """Create new context with additional metadata."""
        return LogContext(
            correlation_id=self.correlation_id,
            operation=self.operation,
            component=self.component,
            metadata={**self.metadata, **kwargs},
        )


class StructuredLogger:
    """Logger that renders a LogContext into each message."""

    def __init__(self, name: str = "image-toolkit.service", level: Optional[str] = None):
        self._logger = get_logger(name)
        if level:
            self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    @staticmethod
    def render(
        message: str, context: Optional[LogContext] = None, **kwargs: Any
    ) -> str:
        if context is None:
            extras = kwargs
            rendered = message
        else:
            extras = {**context.metadata, **kwargs}
            rendered = f"[{context.correlation_id}] {message}"
            if context.operation:
                rendered = f"[{context.operation}] {rendered}"
        if extras:
            rendered += " (" + ", ".join(f"{k}={v}" for k, v in extras.items()) + ")"
        return rendered

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._logger.debug(self.render(message, context, **kwargs))

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._logger.info(self.render(message, context, **kwargs))

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._logger.warning(self.render(message, context, **kwargs))

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        self._logger.error(self.render(message, context, **kwargs))


@dataclass
class OperationMetrics:
    """Timing record for one operation call."""

    operation: str
    start_time: float
    end_time: float
    success: bool
    error_message: Optional[str] = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def duration_ms(self) -> float:
        return self.duration * 1000


class MetricsCollector:
    """In-memory collector for operation timings."""

    def __init__(self) -> None:
        self._metrics: List[OperationMetrics] = []

    def record_metric(self, metric: OperationMetrics) -> None:
        self._metrics.append(metric)

    def get_metrics(self, operation: Optional[str] = None) -> List[OperationMetrics]:
        """Get recorded metrics, optionally filtered by operation."""
        if operation:
            return [m for m in self._metrics if m.operation == operation]
        return self._metrics.copy()

    def get_summary(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """Get summary statistics for metrics."""
        metrics = self.get_metrics(operation)
        if not metrics:
            return {}

        durations = [m.duration for m in metrics]
        successful = sum(1 for m in metrics if m.success)
        return {
            "total_operations": len(metrics),
            "successful_operations": successful,
            "failed_operations": len(metrics) - successful,
            "success_rate": successful / len(metrics),
            "avg_duration": sum(durations) / len(durations),
            "min_duration": min(durations),
            "max_duration": max(durations),
            "total_duration": sum(durations),
        }

    def clear_metrics(self) -> None:
        self._metrics.clear()
