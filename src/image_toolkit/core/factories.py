"""Factory classes for creating configured service instances."""

from typing import Optional

from .logging_config import set_global_level
from .models import ToolkitConfig
from .observability import MetricsCollector, StructuredLogger
from .protocols import LoggerProtocol
from .services import CommandDispatcher, ImageToolkitService


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(
        name: str = "image-toolkit.service", level: Optional[str] = None
    ) -> LoggerProtocol:
        """Create a configured structured logger."""
        return StructuredLogger(name, level)


class ToolkitServiceFactory:
    """Factory for creating a fully wired service and dispatcher."""

    @staticmethod
    def create_service(
        config: Optional[ToolkitConfig] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> ImageToolkitService:
        """Create a service, reading configuration from the environment when none is given."""
        if config is None:
            config = ToolkitConfig.from_env()

        if logger is None:
            set_global_level(config.log_level)
            logger = LoggerFactory.create_logger(level=config.log_level)

        return ImageToolkitService(
            logger=logger, metrics_collector=metrics_collector, config=config
        )

    @staticmethod
    def create_dispatcher(
        config: Optional[ToolkitConfig] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> CommandDispatcher:
        """Create a command dispatcher backed by a new service."""
        service = ToolkitServiceFactory.create_service(
            config=config, logger=logger, metrics_collector=metrics_collector
        )
        if logger is None:
            logger = LoggerFactory.create_logger(level=service.config.log_level)
        return CommandDispatcher(service, logger)
