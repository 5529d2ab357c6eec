"""Service wrapper over the image operations and the command dispatcher."""

import time
from typing import Any, Callable, Dict, Mapping, Optional, Union

from . import operations
from .exceptions import ImageToolkitError
from .models import (
    CommandResponse,
    ConvertSpec,
    CropSpec,
    ImageInfoResult,
    ProcessedImageResult,
    ResizeSpec,
    ToolkitConfig,
)
from .observability import LogContext, MetricsCollector, OperationMetrics
from .protocols import ImageOperationsProtocol, LoggerProtocol

ResultT = Union[ProcessedImageResult, ImageInfoResult]


class ImageToolkitService:
    """Runs operations with logging context and timing metrics."""

    def __init__(
        self,
        logger: LoggerProtocol,
        metrics_collector: Optional[MetricsCollector] = None,
        config: Optional[ToolkitConfig] = None,
    ):
        self._logger = logger
        self._metrics_collector = metrics_collector
        self._config = config or ToolkitConfig()

    @property
    def config(self) -> ToolkitConfig:
        return self._config

    def _run(
        self, operation: str, func: Callable[..., ResultT], *args: Any, **metadata: Any
    ) -> ResultT:
        log_context = LogContext(
            operation=operation, component="image_toolkit_service"
        ).with_metadata(**metadata)
        self._logger.debug(f"Starting {operation}", log_context)

        start_time = time.perf_counter()
        error_message = None
        try:
            result = func(*args, config=self._config)
        except ImageToolkitError as exc:
            error_message = str(exc)
            self._logger.error(
                f"{operation} failed", log_context, stage=exc.stage, error=error_message
            )
            raise
        finally:
            end_time = time.perf_counter()
            if self._metrics_collector is not None:
                self._metrics_collector.record_metric(
                    OperationMetrics(
                        operation=operation,
                        start_time=start_time,
                        end_time=end_time,
                        success=error_message is None,
                        error_message=error_message,
                    )
                )

        self._logger.info(
            f"Completed {operation}",
            log_context,
            width=result.width,
            height=result.height,
            size_bytes=result.size_bytes,
            duration_ms=round((end_time - start_time) * 1000, 2),
        )
        return result

    def crop(
        self, payload: str, spec: Union[CropSpec, Mapping[str, Any]]
    ) -> ProcessedImageResult:
        return self._run("crop", operations.crop, payload, spec)

    def resize(
        self, payload: str, spec: Union[ResizeSpec, Mapping[str, Any]]
    ) -> ProcessedImageResult:
        return self._run("resize", operations.resize, payload, spec)

    def convert(
        self, payload: str, spec: Union[ConvertSpec, Mapping[str, Any]]
    ) -> ProcessedImageResult:
        return self._run("convert", operations.convert, payload, spec)

    def compare(self, first_payload: str, second_payload: str) -> ProcessedImageResult:
        return self._run("compare", operations.compare, first_payload, second_payload)

    def inspect(self, payload: str) -> ImageInfoResult:
        return self._run("inspect", operations.inspect, payload)


class CommandDispatcher:
    """
    Routes named desktop commands to the operations.

    Arguments arrive as a JSON-style mapping; results and errors go back as a
    CommandResponse whose ``error`` is a plain message string.
    """

    COMMANDS: Dict[str, tuple] = {
        "crop_image": ("crop", ("base64_data", "params")),
        "resize_image": ("resize", ("base64_data", "params")),
        "convert_image": ("convert", ("base64_data", "params")),
        "compare_images": ("compare", ("base64_data1", "base64_data2")),
        "get_image_info": ("inspect", ("base64_data",)),
    }

    def __init__(self, service: ImageOperationsProtocol, logger: LoggerProtocol):
        self._service = service
        self._logger = logger

    @classmethod
    def command_names(cls) -> list:
        return sorted(cls.COMMANDS)

    def dispatch(self, command: str, arguments: Mapping[str, Any]) -> CommandResponse:
        """Run ``command`` and wrap its outcome; never raises for toolkit errors."""
        # Accept the "_command" suffix used by desktop command registrations.
        name = command[: -len("_command")] if command.endswith("_command") else command
        if name not in self.COMMANDS:
            self._logger.warning(f"Unknown command: {command}")
            return CommandResponse(ok=False, error=f"Unknown command: {command}")

        method_name, argument_names = self.COMMANDS[name]
        missing = [arg for arg in argument_names if arg not in arguments]
        if missing:
            return CommandResponse(
                ok=False,
                error=f"Missing argument(s) for {name}: {', '.join(missing)}",
            )

        method = getattr(self._service, method_name)
        try:
            result = method(*(arguments[arg] for arg in argument_names))
        except ImageToolkitError as exc:
            return CommandResponse(ok=False, error=str(exc))
        return CommandResponse(ok=True, result=result.model_dump())
