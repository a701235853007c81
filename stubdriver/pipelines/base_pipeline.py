"""
Base pipeline module.

This module defines the abstract Pipeline class and the PipelineResult
returned by every pipeline run.
"""

import time
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """
    Results from a pipeline execution.

    A successful run carries its outputs; a failed run carries its errors
    and no outputs, never a partial set.
    """

    # Whether the pipeline completed successfully
    success: bool = False

    # Time taken to execute the pipeline
    execution_time: float = 0.0

    # Outputs produced by the pipeline, empty on failure
    outputs: dict[str, Any] = field(default_factory=dict)

    # Counts collected during execution
    metrics: dict[str, Any] = field(default_factory=dict)

    # Informational messages
    messages: list[str] = field(default_factory=list)

    # Non-fatal findings about the inputs
    warnings: list[str] = field(default_factory=list)

    # User-facing error messages
    errors: list[str] = field(default_factory=list)

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None


class Pipeline(ABC):
    """
    Abstract base class for pipelines.

    Subclasses implement setup() and execute(). The base class keeps the
    timing, messages, warnings, errors and metrics of the current run and
    clears them when the next run starts.
    """

    def __init__(self, name: str):
        """
        Initialize the pipeline.

        Args:
            name: Name used in log lines
        """
        self.name = name
        self.messages: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.metrics: dict[str, Any] = {}
        self.start_time = None
        self.end_time = None

    @abstractmethod
    def setup(self, **kwargs) -> bool:
        """
        Provide the inputs of the next run.

        Returns:
            True if the inputs are usable, False otherwise
        """

    @abstractmethod
    def execute(self, **kwargs) -> PipelineResult:
        """Run the pipeline once."""

    def _start_execution(self) -> None:
        self.messages = []
        self.warnings = []
        self.errors = []
        self.metrics = {}
        self.end_time = None
        self.start_time = time.time()
        logger.info("Starting %s pipeline", self.name)

    def _end_execution(self) -> float:
        """
        Record the end time of execution.

        Returns:
            Execution time in seconds
        """
        self.end_time = time.time()
        execution_time = self.end_time - self.start_time
        logger.info("Completed %s pipeline in %.2f seconds", self.name, execution_time)
        return execution_time

    def add_message(self, message: str) -> None:
        self.messages.append(message)
        logger.info(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        logger.error(message)

    def add_metric(self, name: str, value: Any) -> None:
        self.metrics[name] = value
        logger.debug("Metric %s: %s", name, value)

    def create_result(self, success: bool, outputs: Optional[dict[str, Any]] = None) -> PipelineResult:
        """
        Close the current run and package its state.

        Args:
            success: Whether the run completed
            outputs: Outputs of a successful run; ignored on failure

        Returns:
            PipelineResult object
        """
        execution_time = 0.0
        if self.start_time is not None:
            if self.end_time is None:
                self._end_execution()
            execution_time = self.end_time - self.start_time

        return PipelineResult(
            success=success,
            execution_time=execution_time,
            outputs=(outputs or {}) if success else {},
            metrics=self.metrics.copy(),
            messages=self.messages.copy(),
            warnings=self.warnings.copy(),
            errors=self.errors.copy(),
        )
