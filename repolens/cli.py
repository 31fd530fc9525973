"""
Command-line interface for repolens.

Provides commands for fetching repositories and inspecting their README
documents.
"""

import sys
from pathlib import Path

import click

from repolens import __version__
from repolens.core.exceptions import ConfigurationError, PipelineError
from repolens.utils.logging_config import setup_logging
from repolens.utils.validation import validate_path, validate_url


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Path to log file"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON configuration file (defaults to REPOLENS_* environment variables)"
)
@click.pass_context
def cli(ctx, verbose, log_file, config_path):
    """
    repolens

    Fetch repositories into transient workspaces and extract their
    README documents for metric analysis.
    """
    from repolens.core.config import Config

    ctx.ensure_object(dict)

    try:
        if config_path:
            config = Config.load_from_file(config_path)
        else:
            config = Config.load_from_env()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ctx.obj["verbose"] = verbose or config.verbose
    ctx.obj["config"] = config

    log_level = "DEBUG" if ctx.obj["verbose"] else "INFO"
    setup_logging(level=log_level, log_file=Path(log_file) if log_file else None)


@cli.command()
@click.argument("url")
@click.argument("destination", type=click.Path(file_okay=False))
@click.pass_context
def fetch(ctx, url, destination):
    """
    Shallow-clone a repository into DESTINATION.

    DESTINATION is created or overwritten and is not removed afterwards.

    Example:

        repolens fetch https://github.com/user/repo ./checkout
    """
    from repolens.ingestion.fetcher import fetch_repository
    from repolens.ingestion.git_handler import GitHandler

    is_valid, error = validate_url(url)
    if not is_valid:
        click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    try:
        path = fetch_repository(url, destination, ctx.obj["config"])
    except PipelineError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    file_count, _ = GitHandler.count_files(path)
    click.echo(f"Fetched {file_count} files into {path}")


@cli.command()
@click.argument("path", type=click.Path())
@click.option(
    "--format", "-f",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format"
)
@click.option(
    "--tree",
    is_flag=True,
    help="Include the full document tree (json only)"
)
@click.pass_context
def readme(ctx, path, format, tree):
    """
    Locate and parse the README of a local repository at PATH.
    """
    from repolens.document.locator import ReadmeLocator
    from repolens.document.parser import MarkdownParser
    from repolens.document.stats import compute_readme_stats
    from repolens.reporting.formatter import format_result

    is_valid, error = validate_path(path)
    if not is_valid:
        click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    document_config = ctx.obj["config"].document
    document = ReadmeLocator.from_config(document_config).locate(path)

    data = {"path": str(Path(path).resolve()), "readme": None, "stats": None}
    if document is not None:
        parsed = MarkdownParser(document_config).parse(document.text)
        data["readme"] = document.to_dict()
        data["stats"] = compute_readme_stats(parsed).to_dict()
        if tree:
            data["tree"] = parsed.to_dict()

    click.echo(format_result(data, format))


@cli.command()
@click.argument("url")
@click.option(
    "--workspace",
    type=click.Path(file_okay=False),
    help="Workspace directory (cleared first, removed afterwards)"
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file for report"
)
@click.option(
    "--format", "-f",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format"
)
@click.pass_context
def inspect(ctx, url, workspace, output, format):
    """
    Fetch a repository, extract its README and clean up.

    Examples:

        repolens inspect https://github.com/user/repo

        repolens inspect https://github.com/user/repo -f json -o result.json
    """
    from repolens.engine import RepositoryDocumentEngine
    from repolens.reporting.formatter import format_result

    is_valid, error = validate_url(url)
    if not is_valid:
        click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    engine = RepositoryDocumentEngine(ctx.obj["config"])

    try:
        result = engine.inspect(url, workspace)
    except PipelineError as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.obj.get("verbose"):
            import traceback
            traceback.print_exc()
        sys.exit(1)

    output_path = Path(output) if output else None
    formatted = format_result(result.to_dict(), format, output_path)

    if output_path:
        click.echo(f"Report saved to: {output_path}")
    else:
        click.echo(formatted)


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(),
    default="config.json",
    help="Output path for configuration file"
)
def init(output):
    """
    Initialize configuration file.

    Creates a default configuration file that can be customized.
    """
    from repolens.core.config import Config

    Config.save_to_file(output)
    click.echo(f"Configuration saved to: {output}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
