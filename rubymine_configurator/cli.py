"""CLI entry point for rubymine-configurator."""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from rubymine_configurator.config import ConfiguratorConfig, load_config
from rubymine_configurator.config.loader import CONFIG_FILENAME, DEFAULT_CONFIG_TEMPLATE
from rubymine_configurator.document import MalformedDocument
from rubymine_configurator.environment import (
    DetectionError,
    detect_ruby,
    find_config_dir,
    find_shadowenv,
    load_credentials,
    options_file,
)
from rubymine_configurator.identity import InterpreterName
from rubymine_configurator.merge import patch_ruby_args, upsert_data_source, upsert_interpreter
from rubymine_configurator.output import ConfigFileWriter, read_existing
from rubymine_configurator.payloads import (
    DataSourceFacts,
    InterpreterFacts,
    MissingRequiredFact,
    RubyArgsFacts,
)

app = typer.Typer(
    name="rubymine-configurator",
    help="Configure RubyMine for shadowenv-managed Ruby projects.",
)

config_app = typer.Typer(help="Manage rubymine-configurator settings.")
app.add_typer(config_app, name="config")

# Global state
_config: ConfiguratorConfig | None = None
_writer = ConfigFileWriter()

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _get_config() -> ConfiguratorConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to rubymine-configurator.yaml")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    logging.basicConfig(
        level=logging.DEBUG if verbose else _LOG_LEVELS[_config.log_level],
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _today() -> str:
    return date.today().isoformat()


def _jdk_table_path(cfg: ConfiguratorConfig) -> Path:
    if cfg.ide.config_dir:
        config_dir = Path(cfg.ide.config_dir).expanduser()
    else:
        config_dir = find_config_dir(cfg.ide.product)
    return options_file(config_dir, "jdk.table.xml")


def _read_or_exit(path: Path) -> str | None:
    try:
        return read_existing(path)
    except OSError as e:
        rprint(f"[red]Error:[/red] could not read {path}: {e}")
        raise typer.Exit(1)


def _write_or_exit(*files: tuple[Path, str]) -> None:
    """Write *files* together; on failure none of them is left changed."""
    try:
        results = _writer.write_all(list(files))
    except OSError as e:
        targets = ", ".join(str(path) for path, _ in files)
        rprint(f"[red]Error:[/red] could not write {targets}: {e}")
        raise typer.Exit(1)
    for written in results:
        if written.backup_path is not None:
            rprint(f"[dim]Backup created:[/dim] {written.backup_path}")


def _show_summary(title: str, summary: dict[str, str]) -> None:
    table = Table(title=title, show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value", style="cyan")
    for label, value in summary.items():
        table.add_row(label, value)
    rprint(table)


def _print_dry_run(summary: dict[str, str], text: str) -> None:
    """Plain-text preview on stdout so it can be redirected to a file."""
    for label, value in summary.items():
        typer.echo(f"# {label}: {value}")
    typer.echo(f"# {'=' * 50}")
    typer.echo("")
    typer.echo(text, nl=False)


@app.command()
def interpreter(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the configuration instead of writing it"
    ),
) -> None:
    """Create or replace the shadowenv Ruby interpreter for the current directory."""
    cfg = _get_config()
    cwd = Path.cwd()

    try:
        ruby = detect_ruby()
        shadowenv = cfg.interpreter.shadowenv_path or find_shadowenv()
        target = _jdk_table_path(cfg)
    except DetectionError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    name = InterpreterName(
        runtime=cfg.interpreter.runtime,
        version=ruby.version,
        scope=cfg.interpreter.scope,
        leaf=cwd.name or "unknown",
        marker=cfg.interpreter.marker,
        date=_today(),
    )
    facts = InterpreterFacts(
        name=name,
        ruby_version=ruby.version,
        ruby_path=ruby.interpreter_path,
        shadowenv_path=shadowenv,
        working_dir=str(cwd),
    )
    summary = {
        "Interpreter name": name.format(),
        "Ruby wrapper": ruby.wrapper_path,
        "Ruby interpreter": ruby.interpreter_path,
        "Ruby version": ruby.version,
        "Current directory": str(cwd),
        "Config file": str(target),
    }

    old = _read_or_exit(target)
    try:
        result = upsert_interpreter(old, facts)
    except (MalformedDocument, MissingRequiredFact) as e:
        rprint(f"[red]Error:[/red] {target}: {e}")
        raise typer.Exit(1)

    if dry_run:
        _print_dry_run(summary, result.text)
        return

    _show_summary("Creating RubyMine interpreter", summary)
    _write_or_exit((target, result.text))
    if result.removed:
        rprint(f"[dim]Replaced {result.removed} previous entr{'y' if result.removed == 1 else 'ies'}[/dim]")
    rprint("[green]Interpreter created successfully![/green]")
    rprint("Restart RubyMine to see the new interpreter in Project Settings > Project Interpreter")


@app.command(name="test-args")
def test_args(
    workspace: Annotated[
        str | None, typer.Option("--workspace", "-w", help="Path to .idea/workspace.xml")
    ] = None,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the configuration instead of writing it"
    ),
) -> None:
    """Point the RUBY_ARGS of the test run configuration at the project's include paths."""
    cfg = _get_config()
    target = Path(workspace or cfg.test_args.workspace_file)

    old = _read_or_exit(target)
    if old is None:
        rprint(f"[red]Error:[/red] workspace file not found: {target}")
        raise typer.Exit(1)

    facts = RubyArgsFacts(working_dir=str(Path.cwd()), include_paths=cfg.test_args.include_paths)
    try:
        result = patch_ruby_args(old, facts)
    except (MalformedDocument, MissingRequiredFact) as e:
        rprint(f"[red]Error:[/red] {target}: {e}")
        raise typer.Exit(1)

    if not result.matched:
        rprint(f"[yellow]Nothing updated:[/yellow] no RUBY_ARGS setting in {target}")
        return
    if not result.changed:
        rprint("[green]RUBY_ARGS already up to date.[/green]")
        return

    if dry_run:
        _print_dry_run({"Workspace file": str(target)}, result.text)
        return

    _write_or_exit((target, result.text))
    rprint(f"[green]Updated RUBY_ARGS[/green] in {target}")


@app.command()
def datasource(
    name: Annotated[
        str | None, typer.Option("--name", "-n", help="Data source name (default: <project>@<host>)")
    ] = None,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the configuration instead of writing it"
    ),
) -> None:
    """Create or replace the project's database data source."""
    cfg = _get_config()
    ds = cfg.datasource
    project = Path.cwd().name or "project"

    creds = load_credentials(ds)
    facts = DataSourceFacts(
        name=name or ds.name or f"{project}@{creds.host}",
        driver=ds.driver,
        host=creds.host,
        port=creds.port,
        user=creds.user,
        database=ds.database,
        schemas=[f"{project}_{schema}" for schema in ds.schemas],
    )
    descriptor_path = Path(ds.descriptor_file)
    local_path = Path(ds.local_file)

    old_descriptor = _read_or_exit(descriptor_path)
    old_local = _read_or_exit(local_path)
    try:
        merged = upsert_data_source(old_descriptor, old_local, facts)
    except (MalformedDocument, MissingRequiredFact) as e:
        rprint(f"[red]Error:[/red] {descriptor_path} / {local_path}: {e}")
        raise typer.Exit(1)

    if dry_run:
        _print_dry_run(
            {"Data source": facts.name, "UUID": merged.uuid, "File": str(descriptor_path)},
            merged.descriptor.text,
        )
        _print_dry_run({"File": str(local_path)}, merged.local.text)
        return

    _write_or_exit(
        (descriptor_path, merged.descriptor.text),
        (local_path, merged.local.text),
    )
    rprint(Panel(
        f"[dim]Name:[/dim]   {facts.name}\n"
        f"[dim]URL:[/dim]    {facts.driver}://{facts.user}@{facts.host}:{facts.port}\n"
        f"[dim]UUID:[/dim]   {merged.uuid} ({'reused' if merged.reused_uuid else 'new'})",
        title="Data Source Configured",
        border_style="green",
    ))


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default rubymine-configurator.yaml in current directory."""
    target = Path(CONFIG_FILENAME)
    if target.exists() and not force:
        rprint(f"[yellow]{CONFIG_FILENAME} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
