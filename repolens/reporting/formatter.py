"""
Result formatters for different output formats.

Formatters render the dictionary form of an acquisition result (or of a
local README inspection) as JSON or human-readable text.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class ReportFormatter(ABC):
    """Abstract base class for result formatters."""

    @abstractmethod
    def format(self, data: Dict[str, Any]) -> str:
        """Format result data to string."""
        pass

    def save(self, data: Dict[str, Any], path: Path) -> None:
        """Save formatted result to file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        content = self.format(data)
        with open(path, "w") as f:
            f.write(content)

        logger.info(f"Report saved to {path}")


class JSONFormatter(ReportFormatter):
    """Formats results as JSON for machine-readable consumption."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, data: Dict[str, Any]) -> str:
        return json.dumps(data, indent=self.indent, default=self._json_serializer)

    def _json_serializer(self, obj: Any) -> Any:
        """Custom JSON serializer for non-standard types."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Path):
            return str(obj)
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        return str(obj)


class TextFormatter(ReportFormatter):
    """Formats results as human-readable text."""

    def __init__(self, width: int = 72):
        self.width = width
        self.section_char = "="
        self.subsection_char = "-"

    def format(self, data: Dict[str, Any]) -> str:
        lines: List[str] = []

        lines.extend(self._format_header(data))
        lines.extend(self._format_repository(data))
        lines.extend(self._format_readme(data))
        lines.extend(self._format_stats(data.get("stats")))
        lines.extend(self._format_metrics(data.get("metrics")))

        return "\n".join(lines)

    def _format_header(self, data: Dict[str, Any]) -> List[str]:
        title = data.get("repository_url") or data.get("path") or "README"
        return [
            self.section_char * self.width,
            self._center(str(title)),
            self.section_char * self.width,
        ]

    def _format_repository(self, data: Dict[str, Any]) -> List[str]:
        if "repository_url" not in data:
            return []

        info = data.get("repository_info") or {}
        lines = self._section("REPOSITORY")
        lines.append(f"  Pipeline ID:  {data.get('pipeline_id')}")
        lines.append(f"  Commit:       {info.get('commit_hash') or 'unknown'}")
        lines.append(f"  Branch:       {info.get('branch') or 'unknown'}")

        fetch_metrics = (data.get("stages") or {}).get("fetch") or {}
        if fetch_metrics:
            size_kb = fetch_metrics.get("total_size_bytes", 0) / 1024
            lines.append(f"  Files:        {fetch_metrics.get('files_fetched', 0)} ({size_kb:.1f} KB)")

        removed = "yes" if data.get("workspace_removed") else "no"
        lines.append(f"  Workspace removed: {removed}")
        return lines

    def _format_readme(self, data: Dict[str, Any]) -> List[str]:
        lines = self._section("README")
        readme = data.get("readme")
        if not readme:
            lines.append("  No README file found in the repository.")
            return lines

        lines.append(f"  File:         {readme['filename']}")
        lines.append(f"  Characters:   {readme['characters']}")
        if readme.get("is_empty"):
            lines.append("  The README is empty.")
        return lines

    def _format_stats(self, stats: Optional[Dict[str, Any]]) -> List[str]:
        if not stats:
            return []

        lines = self._section("STRUCTURE")
        lines.append(f"  Top-level nodes:  {stats['top_level_nodes']}")
        lines.append(f"  Headings:         {stats['heading_count']} (max depth {stats['max_heading_depth']})")
        lines.append(f"  Paragraphs:       {stats['paragraphs']}")
        lines.append(f"  Code blocks:      {stats['code_blocks']}")
        if stats["code_languages"]:
            lines.append(f"  Code languages:   {', '.join(stats['code_languages'])}")
        lines.append(f"  Links / images:   {stats['links']} / {stats['images']}")
        lines.append(f"  Tables:           {stats['tables']}")
        lines.append(f"  List items:       {stats['list_items']}")
        if stats["task_items"]:
            lines.append(f"  Tasks done:       {stats['completed_tasks']}/{stats['task_items']}")
        lines.append(f"  Words:            {stats['word_count']}")

        if stats["section_titles"]:
            lines.append("")
            lines.append("  Sections:")
            for title in stats["section_titles"]:
                lines.append(f"    - {title}")
        return lines

    def _format_metrics(self, metrics: Optional[Dict[str, Any]]) -> List[str]:
        if not metrics:
            return []

        lines = self._section("METRICS")
        for name in ("responsiveness", "correctness", "ramp_up"):
            value = metrics.get(name)
            shown = "unavailable" if value is None or value < 0 else f"{value:.4f}"
            lines.append(f"  {name.replace('_', ' ').capitalize():<16}{shown}")
        lines.append(f"  {'License':<16}{metrics.get('license') or 'unknown'}")
        for name, error in (metrics.get("errors") or {}).items():
            lines.append(f"  ! {name}: {error}")
        return lines

    def _section(self, title: str) -> List[str]:
        return ["", title, self.subsection_char * len(title)]

    def _center(self, text: str) -> str:
        """Center text within width."""
        padding = max((self.width - len(text)) // 2, 0)
        return " " * padding + text


def format_result(
    data: Dict[str, Any],
    format_type: str = "text",
    output_path: Optional[Path] = None,
) -> str:
    """
    Format and optionally save result data.

    Args:
        data: Dictionary form of a result.
        format_type: Output format ("text", "json").
        output_path: Optional path to save the output.

    Returns:
        Formatted string.
    """
    if format_type == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    formatted = formatter.format(data)

    if output_path:
        formatter.save(data, output_path)

    return formatted
