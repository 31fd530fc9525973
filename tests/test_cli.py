"""
Unit tests for the command-line interface.
"""

import json
import logging
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from click.testing import CliRunner

from repolens.cli import cli
from repolens.core.config import Config


class TestCLI(unittest.TestCase):
    """Tests for CLI commands."""

    def setUp(self):
        Config.reset()
        self.runner = CliRunner()
        self.tmpdir = Path(tempfile.mkdtemp())

    def tearDown(self):
        Config.reset()
        shutil.rmtree(self.tmpdir, ignore_errors=True)
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)

    def test_readme_text(self):
        (self.tmpdir / "README.md").write_text("# Demo\n\n## Usage\n\nRun it.\n")

        result = self.runner.invoke(cli, ["readme", str(self.tmpdir)], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("README.md", result.output)
        self.assertIn("STRUCTURE", result.output)
        self.assertIn("- Usage", result.output)

    def test_readme_json(self):
        (self.tmpdir / "README.md").write_text("# Demo\n")

        result = self.runner.invoke(
            cli, ["readme", str(self.tmpdir), "-f", "json", "--tree"], obj={}
        )

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('"filename": "README.md"', result.output)
        self.assertIn('"heading_count": 1', result.output)
        self.assertIn('"type": "root"', result.output)

    def test_readme_missing(self):
        result = self.runner.invoke(cli, ["readme", str(self.tmpdir)], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("No README file found", result.output)

    def test_readme_invalid_path(self):
        result = self.runner.invoke(
            cli, ["readme", str(self.tmpdir / "missing")], obj={}
        )

        self.assertEqual(result.exit_code, 1)

    def test_init(self):
        output = self.tmpdir / "config.json"

        result = self.runner.invoke(cli, ["init", "-o", str(output)], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        with open(output) as f:
            data = json.load(f)
        self.assertEqual(data["fetch"]["clone_depth"], 1)

    def test_config_file_is_used(self):
        config_path = self.tmpdir / "config.json"
        config_path.write_text(json.dumps({
            "document": {"readme_filenames": ["README.rst"]},
        }))
        (self.tmpdir / "README.rst").write_text("Title\n=====\n")

        result = self.runner.invoke(
            cli,
            ["--config", str(config_path), "readme", str(self.tmpdir), "-f", "json"],
            obj={},
        )

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('"filename": "README.rst"', result.output)

    def test_invalid_environment_config(self):
        with mock.patch.dict(os.environ, {"REPOLENS_GIT_TIMEOUT": "five minutes"}):
            result = self.runner.invoke(cli, ["readme", str(self.tmpdir)], obj={})

        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, SystemExit)
        self.assertIn("REPOLENS_GIT_TIMEOUT", result.output)

    def test_fetch_invalid_url(self):
        result = self.runner.invoke(
            cli, ["fetch", "not a url", str(self.tmpdir / "dest")], obj={}
        )

        self.assertEqual(result.exit_code, 1)
        self.assertFalse((self.tmpdir / "dest").exists())

    def test_inspect_invalid_url(self):
        result = self.runner.invoke(cli, ["inspect", "ftp://example.com/repo"], obj={})

        self.assertEqual(result.exit_code, 1)


if __name__ == "__main__":
    unittest.main()
