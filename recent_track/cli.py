"""Typer CLI application for recent-track.

With no subcommand it is the shell-hook entry point: it reads the working
directory and the command line from stdin and records what the command
touched. Subcommands inspect the record file and print shell integration.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from typing import Annotated, Optional

import typer
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from recent_track import __version__
from recent_track.config import (
    ConfigError,
    HomeNotSetError,
    TrackerConfig,
    get_home,
    load_config,
)
from recent_track.records import Record, RecordKind
from recent_track.utils import (
    console,
    fuzzy_match,
    print_error,
    print_info,
    print_success,
    setup_logging,
)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="recent-track",
    help="Track files, directories and hosts referenced from your shell.",
    no_args_is_help=False,
    rich_markup_mode="rich",
    add_completion=False,
)


class Shell(str, Enum):
    BASH = "bash"
    ZSH = "zsh"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config_or_exit() -> TrackerConfig:
    """Load config, printing a helpful error and exiting on failure."""
    try:
        config = load_config()
    except ConfigError as exc:
        print_error(str(exc))
        raise typer.Exit(1)
    setup_logging(config.log_level)
    return config


def _load_config_for_hook() -> TrackerConfig:
    """Load config for recording; only a missing home directory is fatal."""
    try:
        config = load_config()
    except HomeNotSetError as exc:
        print_error(str(exc))
        raise typer.Exit(1)
    except ConfigError as exc:
        config = TrackerConfig.defaults(get_home())
        setup_logging(config.log_level)
        logger.warning("Using default settings: %s", exc)
        return config
    setup_logging(config.log_level)
    return config


def _record_value(record: Record) -> str:
    return getattr(record, "path", None) or getattr(record, "spec", "")


def _print_records(records: list[Record]) -> None:
    for record in records:
        console.print(
            Text.assemble((f"{record.kind.value:<5}", "dim"), " ", _record_value(record))
        )


def _record(cwd: str, command_line: str, *, verbose: bool = False) -> None:
    from recent_track.tracker import track

    config = _load_config_for_hook()
    result = track(cwd, command_line, config)
    if not verbose:
        return
    if result.aborted:
        print_info(f"{result.verb.value} with a leading target directory; nothing recorded.")
    _print_records(result.records)


# ---------------------------------------------------------------------------
# Default callback — record from stdin when no subcommand given
# ---------------------------------------------------------------------------


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", "-V", help="Show version and exit.")
    ] = False,
):
    """Record one command: reads the working directory and the command line from stdin."""
    if version:
        console.print(f"recent-track [bold]{__version__}[/bold]")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        cwd = sys.stdin.readline().rstrip("\n")
        command_line = sys.stdin.readline().rstrip("\n")
        _record(cwd, command_line)


# ---------------------------------------------------------------------------
# recent-track record
# ---------------------------------------------------------------------------


@app.command("record")
def cmd_record(
    cwd: Annotated[str, typer.Argument(help="Working directory the command ran in.")],
    command_line: Annotated[str, typer.Argument(help="The command line as typed.")],
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Print the records produced.")
    ] = False,
):
    """Record one command given as arguments."""
    _record(cwd, command_line, verbose=verbose)


# ---------------------------------------------------------------------------
# recent-track ls
# ---------------------------------------------------------------------------


@app.command("ls")
def cmd_ls(
    query: Annotated[
        Optional[str], typer.Argument(help="Optional fuzzy filter.")
    ] = None,
    kind: Annotated[
        Optional[RecordKind], typer.Option("--kind", "-k", help="Only show this kind of record.")
    ] = None,
    limit: Annotated[
        Optional[int], typer.Option("--limit", "-n", min=1, help="Show at most N records.")
    ] = None,
    plain: Annotated[
        bool, typer.Option("--plain", "-p", help="One stored line per record, for pipes.")
    ] = False,
):
    """List recorded objects, most recent first."""
    config = _load_config_or_exit()

    from recent_track.persistence import load_store

    records = list(load_store(config.data_file))
    if kind is not None:
        records = [r for r in records if r.kind is kind]
    if query:
        matched = fuzzy_match(query, [_record_value(r) for r in records])
        records = [records[idx] for idx, _ in matched]
    if limit is not None:
        records = records[:limit]

    if plain:
        for record in records:
            typer.echo(record.encode())
        return

    if not records:
        print_info("No matching records.")
        raise typer.Exit()

    table = Table(
        title=f"Recent objects — {config.data_file}",
        show_header=True,
        header_style="bold magenta",
        border_style="bright_blue",
        show_lines=False,
    )
    table.add_column("#", justify="right", style="dim", min_width=3)
    table.add_column("Kind", style="green", min_width=5)
    table.add_column("Object", style="cyan", min_width=20)

    for idx, record in enumerate(records, start=1):
        table.add_row(str(idx), record.kind.value, Text(_record_value(record)))

    console.print()
    console.print(table)
    console.print()


# ---------------------------------------------------------------------------
# recent-track config
# ---------------------------------------------------------------------------


@app.command("config")
def cmd_config():
    """Show active config path and validate it."""
    from recent_track.config import ENV_CONFIG_VAR, get_config_path, validate_config_file

    try:
        home = get_home()
    except HomeNotSetError as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    path = get_config_path(home)
    env_value = os.environ.get(ENV_CONFIG_VAR)
    console.print(Panel(
        f"[bold]Config path:[/bold] {path}\n"
        f"[bold]Env var:[/bold]    {(ENV_CONFIG_VAR + '=' + env_value) if env_value else '[dim]not set[/dim]'}",
        title="[bold]recent-track config[/bold]",
        border_style="blue",
    ))

    ok, msg = validate_config_file(home=home)
    if ok:
        print_success(msg)
    else:
        print_error(msg)
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# recent-track hook
# ---------------------------------------------------------------------------

# Both snippets capture $PWD as a command starts and report it with the typed
# line after the command finishes.

_BASH_HOOK = """\
__recent_track_cwd=
read -r __recent_track_histnum _ <<< "$(HISTTIMEFORMAT= builtin history 1)"
__recent_track_preexec() {
    [ -n "$COMP_LINE" ] && return
    [ -z "$__recent_track_cwd" ] && __recent_track_cwd=$PWD
}
__recent_track_precmd() {
    local num line
    read -r num line <<< "$(HISTTIMEFORMAT= builtin history 1)"
    if [ -n "$__recent_track_cwd" ] && [ -n "$line" ] && [ "$num" != "$__recent_track_histnum" ]; then
        (printf '%s\\n%s\\n' "$__recent_track_cwd" "$line" | command recent-track >/dev/null 2>&1 &)
    fi
    __recent_track_histnum=$num
    __recent_track_cwd=
}
trap '__recent_track_preexec' DEBUG
PROMPT_COMMAND="${PROMPT_COMMAND:+$PROMPT_COMMAND;}__recent_track_precmd"
"""

_ZSH_HOOK = """\
__recent_track_preexec() {
    __recent_track_cwd=$PWD
    __recent_track_line=$1
}
__recent_track_precmd() {
    if [[ -n $__recent_track_line ]]; then
        (printf '%s\\n%s\\n' "$__recent_track_cwd" "$__recent_track_line" | command recent-track >/dev/null 2>&1 &)
    fi
    __recent_track_line=
}
autoload -Uz add-zsh-hook
add-zsh-hook preexec __recent_track_preexec
add-zsh-hook precmd __recent_track_precmd
"""


@app.command("hook")
def cmd_hook(
    shell: Annotated[Shell, typer.Argument(help="Shell to integrate with.")],
):
    """Print the shell integration snippet. Use: eval "$(recent-track hook zsh)"."""
    snippet = _BASH_HOOK if shell is Shell.BASH else _ZSH_HOOK
    typer.echo(snippet, nl=False)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def app_entry() -> None:
    """Console script entry point for ``recent-track``."""
    app()
