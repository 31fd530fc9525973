"""
Unit tests for the acquisition engine and metric suite.
"""

import shutil
import tempfile
import unittest
from pathlib import Path

from repolens.core.config import FetchConfig, PipelineConfig
from repolens.core.exceptions import FetchError, InvalidRepositoryURLError
from repolens.document.stats import ReadmeStats
from repolens.engine import AcquisitionResult, RepositoryDocumentEngine
from repolens.ingestion.git_handler import GitHandler
from repolens.metrics import UNAVAILABLE, MetricResults, MetricSuite

from test_ingestion import GIT_AVAILABLE, make_source_repository


class FakeGitHandler(GitHandler):
    """GitHandler that writes a canned working tree instead of cloning."""

    def __init__(self, files=None, error=None, partial=False):
        self.config = FetchConfig()
        self._git_available = True
        self.files = files or {}
        self.error = error
        self.partial = partial
        self.destinations = []

    def clone_repository(self, url, destination):
        destination = Path(destination)
        self.destinations.append(destination)
        destination.mkdir(parents=True, exist_ok=True)

        if self.partial:
            (destination / ".git").mkdir(exist_ok=True)
            (destination / "partial.pack").write_bytes(b"\x00" * 64)

        if self.error is not None:
            raise self.error

        for name, content in self.files.items():
            (destination / name).write_text(content)
        return destination

    def get_repository_info(self, repo_path):
        return {
            "commit_hash": "0" * 40,
            "branch": "main",
            "remote_url": "https://github.com/user/repo",
            "is_git_repo": True,
        }


class EngineTestCase(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        self.config = PipelineConfig(work_dir=str(self.tmpdir / "work"))

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def make_engine(self, **kwargs):
        return RepositoryDocumentEngine(self.config, FakeGitHandler(**kwargs))


class TestRepositoryDocumentEngine(EngineTestCase):
    """Tests for fetch, extraction and cleanup."""

    def test_inspect_extracts_readme(self):
        engine = self.make_engine(files={
            "README.md": "# Demo\n\nSome text.\n\n## Install\n\n```sh\nmake\n```\n",
            "setup.py": "",
        })

        result = engine.inspect("https://github.com/user/repo")

        self.assertIsInstance(result, AcquisitionResult)
        self.assertEqual(result.readme.filename, "README.md")
        self.assertEqual(len(result.tree), 4)
        self.assertEqual(result.stats.heading_count, 2)
        self.assertEqual(result.stats.code_languages, ["sh"])
        self.assertEqual(result.repository_info["branch"], "main")
        self.assertTrue(result.stage_metrics["document"]["readme_found"])
        self.assertEqual(result.stage_metrics["fetch"]["files_fetched"], 2)

    def test_workspace_removed_after_success(self):
        engine = self.make_engine(files={"README.md": "# Demo\n"})

        result = engine.inspect("https://github.com/user/repo")

        self.assertTrue(result.workspace_removed)
        self.assertFalse(result.workspace_path.exists())
        self.assertEqual(list((self.tmpdir / "work").iterdir()), [])

    def test_missing_readme(self):
        engine = self.make_engine(files={"main.py": "print(1)\n"})

        result = engine.inspect("https://github.com/user/repo")

        self.assertIsNone(result.readme)
        self.assertIsNone(result.readme_text)
        self.assertIsNone(result.tree)
        self.assertIsNone(result.stats)
        self.assertFalse(result.stage_metrics["document"]["readme_found"])
        self.assertTrue(result.workspace_removed)

    def test_empty_readme_differs_from_missing(self):
        engine = self.make_engine(files={"README.md": ""})

        result = engine.inspect("https://github.com/user/repo")

        self.assertEqual(result.readme_text, "")
        self.assertEqual(len(result.tree), 0)

    def test_fetch_failure_removes_workspace(self):
        handler = FakeGitHandler(error=FetchError("Git clone failed"), partial=True)
        engine = RepositoryDocumentEngine(self.config, handler)

        with self.assertRaises(FetchError):
            engine.inspect("https://github.com/user/missing")

        self.assertEqual(len(handler.destinations), 1)
        self.assertFalse(handler.destinations[0].exists())

    def test_malformed_url_removes_workspace(self):
        """Test cleanup when the real fetcher rejects the URL."""
        engine = RepositoryDocumentEngine(self.config, GitHandler(self.config.fetch))
        workspace = self.tmpdir / "explicit"

        for url in ("not a url", "-uecho@host:path"):
            with self.assertRaises(InvalidRepositoryURLError):
                engine.inspect(url, workspace)
            self.assertFalse(workspace.exists())

            with self.assertRaises(InvalidRepositoryURLError):
                engine.inspect(url)
            self.assertEqual(list((self.tmpdir / "work").iterdir()), [])

    def test_explicit_workspace_is_cleared_and_removed(self):
        workspace = self.tmpdir / "explicit"
        workspace.mkdir()
        (workspace / "stale.txt").write_text("left over")
        handler = FakeGitHandler(files={"README.md": "# Fresh\n"})
        engine = RepositoryDocumentEngine(self.config, handler)

        with engine.open_repository("https://github.com/user/repo", workspace) as result:
            self.assertEqual(result.workspace_path, workspace)
            self.assertFalse((workspace / "stale.txt").exists())

        self.assertFalse(workspace.exists())

    def test_working_tree_alive_inside_block(self):
        engine = self.make_engine(files={"README.md": "# Demo\n", "main.py": ""})

        with engine.open_repository("https://github.com/user/repo") as result:
            path = result.workspace_path
            self.assertTrue((path / "main.py").is_file())
            self.assertFalse(result.workspace_removed)

        self.assertFalse(path.exists())
        self.assertTrue(result.workspace_removed)

    def test_error_inside_block_still_cleans_up(self):
        engine = self.make_engine(files={"README.md": "# Demo\n"})
        path = None

        with self.assertRaises(RuntimeError):
            with engine.open_repository("https://github.com/user/repo") as result:
                path = result.workspace_path
                raise RuntimeError("analysis crashed")

        self.assertIsNotNone(path)
        self.assertFalse(path.exists())

    def test_each_invocation_gets_its_own_workspace(self):
        handler = FakeGitHandler(files={"README.md": "# Demo\n"})
        engine = RepositoryDocumentEngine(self.config, handler)

        engine.inspect("https://github.com/user/one")
        engine.inspect("https://github.com/user/two")

        self.assertEqual(len(handler.destinations), 2)
        self.assertNotEqual(handler.destinations[0], handler.destinations[1])

    def test_result_serialization(self):
        engine = self.make_engine(files={"README.md": "# Demo\n"})

        data = engine.inspect("https://github.com/user/repo").to_dict(include_tree=True)

        self.assertEqual(data["repository_url"], "https://github.com/user/repo")
        self.assertEqual(data["readme"]["filename"], "README.md")
        self.assertEqual(data["tree"]["type"], "root")
        self.assertIsNone(data["metrics"])

    @unittest.skipUnless(GIT_AVAILABLE, "git is not installed")
    def test_local_round_trip(self):
        origin = make_source_repository(self.tmpdir)
        engine = RepositoryDocumentEngine(self.config)

        result = engine.inspect(origin.as_uri())

        self.assertEqual(result.readme.filename, "README.md")
        self.assertEqual(result.stats.section_titles, ["Sample"])
        self.assertTrue(result.repository_info["is_git_repo"])
        self.assertFalse(result.workspace_path.exists())


class TestMetricSuite(EngineTestCase):
    """Tests for running metric analyzers against an acquisition."""

    def test_failures_degrade_to_sentinel(self):
        def broken(repository_url):
            raise ConnectionError("API unreachable")

        suite = MetricSuite(
            responsiveness_scorer=broken,
            ramp_up_scorer=lambda stats: 0.5,
        )

        with self.assertLogs("repolens.metrics", level="ERROR"):
            results = suite.run("https://github.com/user/repo", self.tmpdir, "# Hi", ReadmeStats())

        self.assertEqual(results.responsiveness, UNAVAILABLE)
        self.assertEqual(results.ramp_up, 0.5)
        self.assertIn("API unreachable", results.errors["responsiveness"])
        self.assertNotIn("ramp_up", results.errors)

    def test_unconfigured_metrics_keep_sentinel(self):
        results = MetricSuite().run("https://github.com/user/repo", self.tmpdir, None, None)

        self.assertIsInstance(results, MetricResults)
        self.assertEqual(results.correctness, UNAVAILABLE)
        self.assertIsNone(results.license)
        self.assertEqual(results.to_dict()["errors"], {})

    def test_analyzers_see_live_working_tree(self):
        seen = {}

        def correctness(local_path):
            seen["exists"] = (local_path / "main.py").is_file()
            return 1.0

        def license_extractor(local_path, readme_text):
            seen["readme"] = readme_text
            return "MIT"

        engine = self.make_engine(files={"README.md": "# Demo\n", "main.py": ""})
        suite = MetricSuite(
            license_extractor=license_extractor,
            correctness_scorer=correctness,
        )

        result = engine.inspect("https://github.com/user/repo", metric_suite=suite)

        self.assertTrue(seen["exists"])
        self.assertEqual(seen["readme"], "# Demo\n")
        self.assertEqual(result.metrics.correctness, 1.0)
        self.assertEqual(result.metrics.license, "MIT")
        self.assertFalse(result.workspace_path.exists())

    def test_ramp_up_receives_none_without_readme(self):
        received = []

        engine = self.make_engine(files={"main.py": ""})
        suite = MetricSuite(ramp_up_scorer=lambda stats: received.append(stats) or 0.0)

        result = engine.inspect("https://github.com/user/repo", metric_suite=suite)

        self.assertEqual(received, [None])
        self.assertEqual(result.metrics.ramp_up, 0.0)


if __name__ == "__main__":
    unittest.main()
