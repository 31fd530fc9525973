"""
Pipeline orchestration for repolens.

Implements a sequential stage pipeline with clear input/output
contracts. Every stage outcome is recorded on the pipeline state;
failures are recorded and then propagated to the caller.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from repolens.core.config import PipelineConfig, Config
from repolens.core.exceptions import PipelineError

logger = logging.getLogger(__name__)


class StageStatus(Enum):
    """Status of a pipeline stage."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StageResult:
    """Result from a pipeline stage execution."""

    stage_name: str
    status: StageStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    output: Any = None
    error: Optional[str] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "stage_name": self.stage_name,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "error": self.error,
            "metrics": self.metrics,
        }


@dataclass
class PipelineState:
    """
    Maintains the complete state of a single pipeline invocation.

    The workspace path is exclusive to the invocation; the state never
    owns its lifecycle.
    """

    pipeline_id: str
    repository_url: str
    workspace_path: Path
    created_at: datetime = field(default_factory=datetime.now)
    stage_results: Dict[str, StageResult] = field(default_factory=dict)
    current_stage: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def get_stage_status(self, stage_name: str) -> StageStatus:
        """Get the status of a specific stage."""
        if stage_name in self.stage_results:
            return self.stage_results[stage_name].status
        return StageStatus.PENDING

    def is_stage_completed(self, stage_name: str) -> bool:
        """Check if a stage has completed successfully."""
        return self.get_stage_status(stage_name) == StageStatus.COMPLETED

    def record_stage_start(self, stage_name: str) -> None:
        """Record that a stage has started."""
        self.current_stage = stage_name
        self.stage_results[stage_name] = StageResult(
            stage_name=stage_name,
            status=StageStatus.RUNNING,
            started_at=datetime.now(),
        )

    def record_stage_completion(
        self, stage_name: str, output: Any, metrics: Dict[str, Any] = None
    ) -> None:
        """Record that a stage has completed successfully."""
        if stage_name in self.stage_results:
            result = self.stage_results[stage_name]
            result.status = StageStatus.COMPLETED
            result.completed_at = datetime.now()
            result.output = output
            result.metrics = metrics or {}

    def record_stage_failure(self, stage_name: str, error: str) -> None:
        """Record that a stage has failed."""
        if stage_name in self.stage_results:
            result = self.stage_results[stage_name]
            result.status = StageStatus.FAILED
            result.completed_at = datetime.now()
            result.error = error

    @property
    def failed(self) -> bool:
        return any(
            result.status == StageStatus.FAILED
            for result in self.stage_results.values()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary for serialization."""
        return {
            "pipeline_id": self.pipeline_id,
            "repository_url": self.repository_url,
            "workspace_path": str(self.workspace_path),
            "created_at": self.created_at.isoformat(),
            "current_stage": self.current_stage,
            "stage_results": {
                name: result.to_dict()
                for name, result in self.stage_results.items()
            },
        }


class PipelineStage(ABC):
    """
    Abstract base class for pipeline stages.

    Each stage must implement the execute method and define its
    input/output contracts.
    """

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this stage."""
        pass

    @property
    def dependencies(self) -> List[str]:
        """List of stage names that must complete before this stage."""
        return []

    @abstractmethod
    def execute(self, state: PipelineState) -> Tuple[Any, Dict[str, Any]]:
        """
        Execute the stage processing.

        Args:
            state: Current pipeline state with data from previous stages.

        Returns:
            Tuple of (output_data, metrics_dict).

        Raises:
            PipelineError: If stage execution fails.
        """
        pass

    def validate_inputs(self, state: PipelineState) -> bool:
        """
        Validate that required inputs are available.

        Args:
            state: Current pipeline state.

        Returns:
            True if inputs are valid, False otherwise.
        """
        for dep in self.dependencies:
            if not state.is_stage_completed(dep):
                self.logger.error(f"Dependency not met: {dep}")
                return False
        return True


class Pipeline:
    """
    Sequential pipeline orchestrator.

    Runs registered stages in the configured order. A stage failure is
    recorded on the state and re-raised; later stages do not run.
    """

    def __init__(self, config: PipelineConfig = None):
        self.config = config or Config.get()
        self.stages: Dict[str, PipelineStage] = {}
        self.execution_order: List[str] = []
        self.logger = logging.getLogger(__name__)

    def register_stage(self, stage: PipelineStage) -> None:
        """Register a stage with the pipeline."""
        self.stages[stage.name] = stage
        self.logger.debug(f"Registered stage: {stage.name}")

    def set_execution_order(self, order: List[str]) -> None:
        """
        Set the order in which stages should execute.

        Args:
            order: List of stage names in execution order.

        Raises:
            ValueError: If a stage in the order is not registered.
        """
        for stage_name in order:
            if stage_name not in self.stages:
                raise ValueError(f"Unknown stage: {stage_name}")
        self.execution_order = order

    def create_state(self, repository_url: str, workspace_path: Path) -> PipelineState:
        return PipelineState(
            pipeline_id=uuid.uuid4().hex[:8],
            repository_url=repository_url,
            workspace_path=Path(workspace_path),
        )

    def run(
        self,
        repository_url: str,
        workspace_path: Path,
        state: PipelineState = None,
    ) -> PipelineState:
        """
        Run all stages for one repository.

        Args:
            repository_url: Remote repository URL.
            workspace_path: Local directory the repository is fetched into.
            state: Optional pre-created state; lets the caller inspect
                recorded stage results when a stage raises.

        Returns:
            Final pipeline state with all results.

        Raises:
            PipelineError: Propagated from the first failing stage, or
                raised when a stage's dependencies have not completed.
        """
        if state is None:
            state = self.create_state(repository_url, workspace_path)

        self.logger.info(f"Starting pipeline {state.pipeline_id}")
        self.logger.info(f"Repository: {repository_url}")

        for stage_name in self.execution_order:
            stage = self.stages[stage_name]

            if not stage.validate_inputs(state):
                message = f"Stage {stage_name} dependencies not met: {stage.dependencies}"
                state.record_stage_start(stage_name)
                state.record_stage_failure(stage_name, message)
                self.logger.error(message)
                raise PipelineError(
                    message,
                    stage=stage_name,
                    details={"dependencies": list(stage.dependencies)},
                )

            self.logger.info(f"Executing stage: {stage_name}")
            state.record_stage_start(stage_name)

            try:
                output, metrics = stage.execute(state)
            except Exception as e:
                state.record_stage_failure(stage_name, str(e))
                self.logger.error(f"Stage {stage_name} failed: {e}")
                raise

            state.record_stage_completion(stage_name, output, metrics)
            state.data[stage_name] = output
            self.logger.info(f"Stage {stage_name} completed: {metrics}")

        return state

    def list_stages(self) -> List[str]:
        """List all registered stage names."""
        return list(self.stages.keys())
