"""
cli.py - Command-line interface for ghapin

This module provides the command-line interface for the ghapin tool,
allowing users to pin GitHub Actions to commit SHAs and update them to
their latest releases.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .core import (
    ActionProcessor,
    ConfigurationError,
    FileResult,
    GitHubClient,
    MalformedReferenceError,
    ReleaseResolver,
    find_actions_in_files,
    generate_default_config,
    load_config,
    summarize,
)
from .core.github import DEFAULT_API_URL, DEFAULT_TIMEOUT
from .utils.banner import _BANNER
from .utils.formatter import format_summary, unified_diff
from .utils.logger import setup_logging
from .utils.version import __version__
from .utils.yaml_handler import find_yaml_files

DRY_RUN_HINT = "Dry run - no files were changed. Use --write/-w to apply the changes."


def _load_settings(ctx: click.Context) -> Dict[str, Any]:
    """Load the configuration once per invocation"""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        try:
            obj["config"] = load_config(obj.get("config_path"))
        except ConfigurationError as e:
            click.echo(f"Error loading config file: {e}", err=True)
            sys.exit(1)
    return obj["config"]


def _collect_files(dir_path: Optional[str], file_path: Optional[str]) -> List[Path]:
    if dir_path and file_path:
        click.echo("Error: Cannot specify both --dir and --file", err=True)
        sys.exit(1)

    if file_path:
        return [Path(file_path)]

    if dir_path:
        files = find_yaml_files(dir_path)
        if not files:
            click.echo(f"No YAML files found in {dir_path}", err=True)
            sys.exit(1)
        return files

    click.echo("Error: Either --dir or --file must be specified", err=True)
    sys.exit(1)


def _build_processor(
    ctx: click.Context, write: bool, jobs: Optional[int]
) -> ActionProcessor:
    config = dict(_load_settings(ctx))
    if jobs is not None:
        config["max_workers"] = jobs

    github = config.get("github", {})
    client = GitHubClient(
        token=ctx.obj.get("token"),
        api_url=github.get("api_url", DEFAULT_API_URL),
        timeout=github.get("timeout", DEFAULT_TIMEOUT),
    )
    return ActionProcessor(ReleaseResolver(client), config=config, write=write)


def _report(ctx: click.Context, results: List[FileResult], title: str, write: bool) -> None:
    config = _load_settings(ctx)
    color = bool(config.get("report", {}).get("color_output", True)) and not ctx.obj.get(
        "no_color", False
    )

    if not write:
        for result in results:
            if result.modified:
                click.echo(unified_diff(result.path, result.original, result.updated, color=color))

    stats = summarize(results)
    click.echo("")
    click.echo(
        format_summary(
            title,
            {
                "Files scanned": stats["total_files"],
                "Files changed": stats["files_changed"],
                "References updated": stats["references_updated"],
                "Files written": stats["files_written"],
                "Errors": stats["errors"],
            },
        )
    )

    if not write and stats["files_changed"]:
        click.echo(f"\n{DRY_RUN_HINT}")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    help="GitHub token to use for authentication (default: $GITHUB_TOKEN)",
)
@click.option("--config", type=click.Path(), help="Path to YAML config file")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    token: Optional[str],
    config: Optional[str],
    no_color: bool,
) -> None:
    """ghapin - pin and update GitHub Actions

    Pins GitHub Actions to release commit SHAs and keeps them up to date.
    """
    setup_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["config_path"] = config
    ctx.obj["no_color"] = no_color

    if ctx.invoked_subcommand is None:
        click.echo(_BANNER)
        click.echo("Use `ghapin --help` for available commands.")


@cli.command()
@click.option("--action", "action_name", help="Action name to pin (required if --all is not given)")
@click.option("--version", "version", help="Version to pin to (required if --all is not given)")
@click.option("--all", "-a", "pin_all", is_flag=True, help="Pin all actions to their latest release")
@click.option("--dir", "dir_path", type=click.Path(), help="Directory containing workflow files")
@click.option("--file", "file_path", type=click.Path(), help="Specific workflow file to pin")
@click.option("--write", "-w", is_flag=True, help="Write changes to files (default is dry run)")
@click.option("--jobs", "-j", type=click.IntRange(min=1), help="Number of files processed in parallel")
@click.pass_context
def pin(
    ctx: click.Context,
    action_name: Optional[str],
    version: Optional[str],
    pin_all: bool,
    dir_path: Optional[str],
    file_path: Optional[str],
    write: bool,
    jobs: Optional[int],
) -> None:
    """Pin GitHub Actions to release commit SHAs

    Examples:

      ghapin pin --all --dir .github/workflows --write

      ghapin pin --action actions/checkout --version v4.2.2 --file .github/workflows/lint.yml
    """
    if pin_all and (action_name or version):
        click.echo("Error: Cannot specify both --all and --action or --version", err=True)
        sys.exit(1)

    if not pin_all and not (action_name and version):
        click.echo("Error: Must specify --action and --version when --all is not given", err=True)
        sys.exit(1)

    files = _collect_files(dir_path, file_path)
    processor = _build_processor(ctx, write, jobs)

    if action_name and version:
        try:
            results = processor.pin_action(files, action_name, version)
        except MalformedReferenceError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        if not results:
            click.echo(f"Error: Could not resolve {action_name}@{version}", err=True)
            sys.exit(1)
    else:
        results = processor.pin_all(files)

    _report(ctx, results, "Pin Summary", write)


@cli.command()
@click.option("--action", "action_name", help="Action name to update")
@click.option("--all", "-a", "update_all", is_flag=True, help="Update all actions")
@click.option("--dir", "dir_path", type=click.Path(), help="Directory containing workflow files")
@click.option("--file", "file_path", type=click.Path(), help="Specific workflow file to update")
@click.option("--write", "-w", is_flag=True, help="Write changes to files (default is dry run)")
@click.option("--jobs", "-j", type=click.IntRange(min=1), help="Number of files processed in parallel")
@click.pass_context
def update(
    ctx: click.Context,
    action_name: Optional[str],
    update_all: bool,
    dir_path: Optional[str],
    file_path: Optional[str],
    write: bool,
    jobs: Optional[int],
) -> None:
    """Update GitHub Actions to their latest versions"""
    if update_all == bool(action_name):
        click.echo("Error: Specify exactly one of --action or --all", err=True)
        sys.exit(1)

    files = _collect_files(dir_path, file_path)
    processor = _build_processor(ctx, write, jobs)
    results = processor.update(files, None if update_all else action_name)

    _report(ctx, results, "Update Summary", write)


@cli.command(name="list")
@click.option("--dir", "dir_path", type=click.Path(), help="Directory containing workflow files")
@click.option("--file", "file_path", type=click.Path(), help="Specific workflow file")
def list_actions(dir_path: Optional[str], file_path: Optional[str]) -> None:
    """List the actions referenced by workflow files"""
    files = _collect_files(dir_path, file_path)
    actions = find_actions_in_files(files)

    if not actions:
        click.echo("No actions found.")
        return

    for action in actions:
        click.echo(action)


@cli.command()
@click.option("--generate", is_flag=True, help="Generate a default config file")
@click.option("--output", type=click.Path(), help="Output path for generated config")
@click.pass_context
def config(ctx: click.Context, generate: bool, output: Optional[str]) -> None:
    """View or validate current config"""
    if generate:
        try:
            config_str = generate_default_config(output_path=output)
        except ConfigurationError as e:
            click.echo(f"❌ {e}", err=True)
            sys.exit(1)

        if output:
            click.echo(f"Default config written to {output}")
        else:
            click.echo(config_str)
        return

    config_data = _load_settings(ctx)
    click.echo("✅ Config loaded and valid.")

    github = config_data.get("github", {})
    click.echo(f" - github.api_url: {github.get('api_url')}")
    click.echo(f" - github.timeout: {github.get('timeout')}")
    click.echo(f" - max_workers: {config_data.get('max_workers')}")
    click.echo(f" - create_backup: {config_data.get('create_backup')}")
    excluded = config_data.get("exclude_actions") or []
    click.echo(f" - exclude_actions: {', '.join(excluded) if excluded else '(none)'}")


@cli.command()
def version() -> None:
    """Print the version information"""
    click.echo(f"ghapin version {__version__}")


if __name__ == "__main__":
    cli()
