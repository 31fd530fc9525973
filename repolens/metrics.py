"""
Contracts for the metric analyzers that consume acquisition output.

The scorers themselves live outside this package. MetricSuite runs
whichever are supplied and degrades each failure to a sentinel so one
broken analyzer never aborts a multi-metric run.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol

from repolens.document.stats import ReadmeStats

logger = logging.getLogger(__name__)

# Score reported when a metric could not be computed
UNAVAILABLE = -1.0


class LicenseExtractor(Protocol):
    def __call__(self, local_path: Path, readme_text: Optional[str]) -> Optional[Any]:
        ...


class ResponsivenessScorer(Protocol):
    def __call__(self, repository_url: str) -> float:
        ...


class CorrectnessScorer(Protocol):
    def __call__(self, local_path: Path) -> float:
        ...


class RampUpScorer(Protocol):
    def __call__(self, stats: Optional[ReadmeStats]) -> float:
        ...


@dataclass
class MetricResults:
    """Outcome of one metric run; failed metrics hold their sentinel."""

    license: Optional[Any] = None
    responsiveness: float = UNAVAILABLE
    correctness: float = UNAVAILABLE
    ramp_up: float = UNAVAILABLE
    errors: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        license_info = self.license
        if hasattr(license_info, "to_dict"):
            license_info = license_info.to_dict()
        return {
            "license": license_info,
            "responsiveness": self.responsiveness,
            "correctness": self.correctness,
            "ramp_up": self.ramp_up,
            "errors": dict(self.errors),
        }


class MetricSuite:
    """
    Runs the configured metric analyzers against one acquisition.

    Analyzers left as None are skipped and keep their sentinel.
    """

    def __init__(
        self,
        license_extractor: Optional[LicenseExtractor] = None,
        responsiveness_scorer: Optional[ResponsivenessScorer] = None,
        correctness_scorer: Optional[CorrectnessScorer] = None,
        ramp_up_scorer: Optional[RampUpScorer] = None,
    ):
        self.license_extractor = license_extractor
        self.responsiveness_scorer = responsiveness_scorer
        self.correctness_scorer = correctness_scorer
        self.ramp_up_scorer = ramp_up_scorer

    def run(
        self,
        repository_url: str,
        local_path: Path,
        readme_text: Optional[str],
        stats: Optional[ReadmeStats],
    ) -> MetricResults:
        """
        Run every configured analyzer.

        Args:
            repository_url: Remote URL of the repository.
            local_path: Fetched working tree (must still exist).
            readme_text: README text, or None when there is no README.
            stats: README stats, or None when there is no README.

        Returns:
            MetricResults with sentinels for skipped or failed analyzers.
        """
        results = MetricResults()

        if self.license_extractor is not None:
            results.license = self._run_one(
                "license", results, None,
                self.license_extractor, local_path, readme_text,
            )

        if self.responsiveness_scorer is not None:
            results.responsiveness = self._run_one(
                "responsiveness", results, UNAVAILABLE,
                self.responsiveness_scorer, repository_url,
            )

        if self.correctness_scorer is not None:
            results.correctness = self._run_one(
                "correctness", results, UNAVAILABLE,
                self.correctness_scorer, local_path,
            )

        if self.ramp_up_scorer is not None:
            results.ramp_up = self._run_one(
                "ramp_up", results, UNAVAILABLE,
                self.ramp_up_scorer, stats,
            )

        return results

    @staticmethod
    def _run_one(
        name: str,
        results: MetricResults,
        sentinel: Any,
        analyzer: Callable[..., Any],
        *args: Any,
    ) -> Any:
        try:
            return analyzer(*args)
        except Exception as e:
            logger.exception(f"Metric {name} failed")
            results.errors[name] = str(e)
            return sentinel
