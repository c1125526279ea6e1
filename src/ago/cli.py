"""Command line interface for ago."""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from ago.bootstrap import (
    AgoPaths,
    BootstrapError,
    Workspace,
    open_workspace,
    resolve_metadata_root,
)
from ago.config import (
    AgoConfig,
    ConfigError,
    ConfigManager,
    assign_nested,
    resolve_with_precedence,
)
from ago.documents import DocumentError, PlaceholderWordAnalyzer
from ago.log import configure_logging
from ago.state import StateError

LOGGER = logging.getLogger(__name__)

PROG_NAME = "ago"
USAGE = f"USAGE: {PROG_NAME} <commands> [argument ...]"
NOARG_ERRMSG = f"{USAGE}\n\nFor detail, try {PROG_NAME} help"
HELP_MSG = "Use the source ;)"

console = Console()
err_console = Console(stderr=True)


@dataclass(slots=True)
class CliSession:
    """Per-invocation objects shared with subcommands through ``ctx.obj``."""

    paths: AgoPaths
    config: AgoConfig
    workspace: Workspace


def _print_plain(text: str) -> None:
    """Print user data verbatim, without Rich markup, emoji or highlighting."""
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


def _report_error(message: str) -> None:
    err_console.print(f"[red]{escape(message)}[/red]", soft_wrap=True)


def _flush(workspace: Workspace) -> None:
    """Persist the collection; a failed write is reported but not fatal."""
    try:
        workspace.flush()
    except StateError as exc:
        _report_error(str(exc))


def _add_fail_fast(workspace: Workspace, sources: Iterable[Path]) -> None:
    """Add ``sources`` in order, stopping at the first failure.

    Documents added before the failure are still flushed.

    Raises:
        click.ClickException: Describing the first failed source.
    """
    failure: click.ClickException | None = None
    for source in sources:
        try:
            record = workspace.repository.add(source)
        except DocumentError as exc:
            failure = click.ClickException(f"failed to add doc {source}: {exc}")
            break
        LOGGER.info("Added document %d: %s", record.id, record.name)

    _flush(workspace)
    if failure is not None:
        raise failure


def _remove_best_effort(workspace: Workspace, arguments: Sequence[str]) -> None:
    """Remove every id in ``arguments``, reporting failures and carrying on."""
    for argument in arguments:
        try:
            doc_id = int(argument)
        except ValueError:
            _report_error(f"argument must be doc id: {argument}")
            continue
        try:
            workspace.repository.remove(doc_id)
        except DocumentError as exc:
            _report_error(f"failed to remove doc id {doc_id}: {exc}")

    _flush(workspace)


class AgoGroup(click.Group):
    """Click group that treats unknown commands as a plain failure (exit 1)."""

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name = args[0] if args else ""
        if cmd_name and not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            raise click.ClickException(f"wrong command: {cmd_name}")
        return super().resolve_command(ctx, args)


@click.group(
    cls=AgoGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(package_name="ago-docs")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ago keeps private copies of your text documents under ~/.ago.

    Args:
        ctx: Click context receiving the session object.
        verbose: If True, force debug logging regardless of configuration.

    Raises:
        click.ClickException: If configuration or metadata cannot be loaded.
    """
    paths = AgoPaths.from_root(resolve_metadata_root())
    overrides = {"logging.level": "DEBUG"} if verbose else None
    try:
        settings = ConfigManager(paths.config).load(cli_overrides=overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(settings.logging.level)

    emit = _print_plain if settings.analysis.echo_content else None
    try:
        workspace = open_workspace(paths, PlaceholderWordAnalyzer(emit))
    except (BootstrapError, StateError) as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = CliSession(paths=paths, config=settings, workspace=workspace)

    if ctx.invoked_subcommand is None:
        console.print("No argument.")
        console.print(NOARG_ERRMSG)
        ctx.exit(1)


@cli.command("ls-docs")
@click.pass_obj
def ls_docs(session: CliSession) -> None:
    """List registered documents as ID: NAME."""
    for line in session.workspace.repository.list_documents():
        _print_plain(line)


@cli.command("add-docs", context_settings={"ignore_unknown_options": True})
@click.argument("sources", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.pass_obj
def add_docs(session: CliSession, sources: tuple[Path, ...]) -> None:
    """Copy one or more files into the document store.

    Processing stops at the first file that cannot be added; files added
    before it stay registered.
    """
    _add_fail_fast(session.workspace, sources)


@cli.command("rm-docs", context_settings={"ignore_unknown_options": True})
@click.argument("ids", nargs=-1, required=True)
@click.pass_obj
def rm_docs(session: CliSession, ids: tuple[str, ...]) -> None:
    """Remove documents by ID, reporting (and skipping) any that fail."""
    _remove_best_effort(session.workspace, ids)


@cli.command("test", context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def do_test(args: tuple[str, ...]) -> None:
    """Start a vocabulary test (not implemented yet)."""
    _print_plain(f"do test [{' '.join(args)}]")


@cli.command("help")
def help_command() -> None:
    """Show the help message."""
    console.print(HELP_MSG)


@cli.group()
def config() -> None:
    """Inspect and update the ago configuration file."""


@config.command("view")
@click.pass_obj
def config_view(session: CliSession) -> None:
    """Display the effective configuration.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager(session.paths.config)
    try:
        effective = manager.load(ensure_file=True)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
@click.pass_obj
def config_set(session: CliSession, key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        session: Session carrying the configuration path.
        key: Dotted path describing the configuration field to update.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager(session.paths.config)
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'logging.level'.")

    try:
        parsed_value: Any = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=AgoConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = [
        line
        for line in difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
        if not line[1:].startswith("# Last updated:")
    ]

    if any(line.startswith(("+", "-")) and not line.startswith(("+++", "---")) for line in diff):
        console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    else:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli(prog_name=PROG_NAME)


if __name__ == "__main__":
    main()
