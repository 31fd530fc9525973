"""
Document extraction pipeline stage.

Locates the README in the fetched workspace, parses it and derives
structural statistics. A missing README is a normal outcome.
"""

import logging
from typing import Any, Dict, Tuple

from repolens.core.config import PipelineConfig
from repolens.core.exceptions import DocumentError
from repolens.core.pipeline import PipelineStage, PipelineState
from repolens.document.locator import ReadmeLocator
from repolens.document.parser import MarkdownParser
from repolens.document.stats import compute_readme_stats

logger = logging.getLogger(__name__)


class DocumentExtractor(PipelineStage):
    """Pipeline stage producing the README document, tree and stats."""

    def __init__(self, config: PipelineConfig):
        super().__init__(config)
        self.locator = ReadmeLocator.from_config(config.document)
        self.parser = MarkdownParser(config.document)

    @property
    def name(self) -> str:
        return "document"

    @property
    def dependencies(self):
        return ["fetch"]

    def execute(self, state: PipelineState) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        fetched = state.data.get("fetch")
        if not fetched or "path" not in fetched:
            raise DocumentError(
                "No fetched repository available",
                details={"pipeline_id": state.pipeline_id},
            )

        readme = self.locator.locate(fetched["path"])
        if readme is None:
            output = {"readme": None, "tree": None, "stats": None}
            metrics = {
                "readme_found": False,
                "readme_filename": None,
                "top_level_nodes": 0,
            }
            return output, metrics

        tree = self.parser.parse(readme.text)
        stats = compute_readme_stats(tree)

        self.logger.info(
            f"Parsed {readme.filename}: {tree.top_level_count} top-level nodes, "
            f"{stats.heading_count} headings"
        )

        output = {"readme": readme, "tree": tree, "stats": stats}
        metrics = {
            "readme_found": True,
            "readme_filename": readme.filename,
            "top_level_nodes": tree.top_level_count,
        }
        return output, metrics
