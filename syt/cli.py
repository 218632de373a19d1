"""The syt command line."""

from __future__ import annotations

import argparse
import contextlib
import os
import re
import shutil
import sqlite3
import subprocess
import sys
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

from syt import config
from syt.filters.playwright import filter_playwright
from syt.filters.pnpm import filter_pnpm_install, filter_pnpm_list, filter_pnpm_outdated
from syt.filters.poetry import filter_poetry_install
from syt.filters.prisma import filter_prisma
from syt.filters.pytest_filter import filter_pytest
from syt.filters.read import filter_read
from syt.filters.ruff import filter_ruff_check, filter_ruff_format
from syt.filters.tsc import filter_tsc
from syt.filters.vitest import filter_vitest
from syt.filters.yarn import filter_yarn_install, filter_yarn_test
from syt.registry import rewrite_command
from syt.runner import FilterFn, Runner
from syt.tee import Tee
from syt.tracker import Record, Tracker
from syt.utils import data_dir

_SHORT = "Token-optimized CLI proxy for AI coding assistants"
_LONG = (
    "SaveYourTokens (syt) is a transparent CLI proxy for AI coding assistants.\n"
    "It intercepts terminal commands, rewrites them to token-optimized equivalents,\n"
    "compresses verbose output, and tracks cumulative token savings."
)
_VERBOSE_HELP = "Increase verbosity (can be repeated)"
_DEFAULT_MAX_LINES = 200
_SHORT_VERBOSE_RE = re.compile(r"-v+")

Handler = Callable[[list[str], int], int]


class _CommandError(Exception):
    """A command failed in a way reported to the user."""


class _Exit(Exception):
    """Stop with the given exit code."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


@dataclass(frozen=True)
class _Command:
    short: str
    run: Handler | None = None
    subcommands: dict[str, _Command] = field(default_factory=dict)


def _db_path(cfg: config.Config) -> str:
    return cfg.tracking.database_path or os.path.join(data_dir(), "syt.db")


def _open_tracker(path: str) -> Tracker | None:
    try:
        return Tracker(path)
    except (OSError, sqlite3.Error):
        return None


@contextlib.contextmanager
def _open_runner(verbose: int) -> Iterator[Runner]:
    cfg = config.load()
    tracker = _open_tracker(_db_path(cfg))
    tee_cfg = cfg.tee
    tee = Tee(
        enabled=tee_cfg.enabled,
        mode=tee_cfg.mode,
        min_size=tee_cfg.min_size,
        max_files=tee_cfg.max_files,
        max_file_size=tee_cfg.max_file_size,
        directory=tee_cfg.directory,
    )
    try:
        yield Runner(verbose=verbose, tracker=tracker, tee=tee)
    finally:
        if tracker is not None:
            tracker.close()


def _run_filtered(
    cmd_name: str, binary: str, args: Sequence[str], filter_fn: FilterFn, verbose: int
) -> int:
    with _open_runner(verbose) as runner:
        try:
            return runner.run_with_filter(cmd_name, binary, args, filter_fn)
        except OSError as exc:
            raise _CommandError(f"running {binary}: {exc}") from exc


def _filtered(
    cmd_name: str,
    binary: str,
    prefix: Sequence[str],
    filter_fn: FilterFn,
    short: str,
    default_args: Sequence[str] = (),
) -> _Command:
    def run(args: list[str], verbose: int) -> int:
        full = [*prefix, *(args or default_args)]
        return _run_filtered(cmd_name, binary, full, filter_fn, verbose)

    return _Command(short, run)


def _parse(parser: argparse.ArgumentParser, args: list[str]) -> argparse.Namespace:
    try:
        return parser.parse_args(args)
    except SystemExit as exc:
        raise _Exit(0 if exc.code in (0, None) else 1) from None


def _read_command(name: str, short: str) -> _Command:
    def run(args: list[str], verbose: int) -> int:
        parser = argparse.ArgumentParser(prog=f"syt {name}", description=short)
        parser.add_argument(
            "--max-lines", type=int, default=_DEFAULT_MAX_LINES,
            help="Maximum lines to display",
        )
        parser.add_argument("-v", "--verbose", action="count", default=0, help=_VERBOSE_HELP)
        parser.add_argument("args", nargs="*")
        ns = _parse(parser, args)
        max_lines = ns.max_lines

        def filter_fn(stdout: str, stderr: str) -> str:
            return filter_read(stdout, stderr, max_lines)

        return _run_filtered("read", "cat", ["-n", *ns.args], filter_fn, verbose + ns.verbose)

    return _Command(short, run)


def _rewrite(args: list[str], verbose: int) -> int:
    parser = argparse.ArgumentParser(
        prog="syt rewrite",
        description="Rewrite a command to its syt equivalent (used by hook)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help=_VERBOSE_HELP)
    parser.add_argument("command")
    ns = _parse(parser, args)
    cfg = config.load()
    result = rewrite_command(ns.command, cfg.hooks.exclude_commands)
    if result is None:
        return 1
    sys.stdout.write(result)
    return 0


def _proxy(args: list[str], verbose: int) -> int:
    if not args:
        raise _CommandError("requires at least 1 arg(s), only received 0")
    binary, *rest = args
    path = shutil.which(binary) or binary

    sys.stdout.flush()
    try:
        completed = subprocess.run([path, *rest], check=False)
    except OSError as exc:
        raise _CommandError(str(exc)) from exc
    exit_code = completed.returncode if completed.returncode >= 0 else 1

    tracker = _open_tracker(_db_path(config.load()))
    if tracker is not None:
        with tracker, contextlib.suppress(sqlite3.Error):
            tracker.track(Record(original_cmd=binary, syt_cmd=f"syt proxy {binary}"))
    return exit_code


def _group(short: str, **subcommands: _Command) -> _Command:
    return _Command(short, subcommands=subcommands)


_COMMANDS: dict[str, _Command] = {
    "cat": _read_command("cat", "cat with line numbers and truncation"),
    "playwright": _filtered(
        "playwright", "npx", ("playwright", "test"), filter_playwright,
        "Filtered playwright test output (failures + summary only)",
    ),
    "pnpm": _group(
        "Token-optimized pnpm commands",
        list=_filtered("pnpm list", "pnpm", ("list",), filter_pnpm_list,
                       "Compact pnpm list output"),
        install=_filtered("pnpm install", "pnpm", ("install",), filter_pnpm_install,
                          "Compact pnpm install output"),
        outdated=_filtered("pnpm outdated", "pnpm", ("outdated",), filter_pnpm_outdated,
                           "Compact pnpm outdated output"),
        add=_filtered("pnpm add", "pnpm", ("add",), filter_pnpm_install,
                      "Compact pnpm add output"),
    ),
    "poetry": _group(
        "Token-optimized poetry commands",
        install=_filtered("poetry install", "poetry", ("install",), filter_poetry_install,
                          "Compact poetry install output"),
        add=_filtered("poetry add", "poetry", ("add",), filter_poetry_install,
                      "Compact poetry add output"),
    ),
    "prisma": _group(
        "Token-optimized prisma commands",
        migrate=_filtered("prisma migrate", "npx", ("prisma", "migrate"), filter_prisma,
                          "Filtered prisma migrate"),
        generate=_filtered("prisma generate", "npx", ("prisma", "generate"), filter_prisma,
                           "Filtered prisma generate"),
    ),
    "proxy": _Command("Passthrough with token tracking", _proxy),
    "pytest": _filtered(
        "pytest", "pytest", (), filter_pytest,
        "Filtered pytest output (failures + summary only)",
    ),
    "read": _read_command("read", "Read file with line numbers and truncation"),
    "rewrite": _Command("Rewrite a command to its syt equivalent (used by hook)", _rewrite),
    "ruff": _group(
        "Token-optimized ruff commands",
        check=_filtered("ruff check", "ruff", ("check",), filter_ruff_check,
                        "Filtered ruff check (grouped violations)"),
        format=_filtered("ruff format", "ruff", ("format",), filter_ruff_format,
                         "Filtered ruff format output"),
    ),
    "tsc": _filtered(
        "tsc", "tsc", (), filter_tsc,
        "Filtered TypeScript compiler (errors grouped by file)",
    ),
    "vitest": _filtered(
        "vitest", "vitest", (), filter_vitest,
        "Filtered vitest output (failures + summary only)", default_args=("run",),
    ),
    "yarn": _group(
        "Token-optimized yarn commands",
        install=_filtered("yarn install", "yarn", ("install",), filter_yarn_install,
                          "Compact yarn install output"),
        add=_filtered("yarn add", "yarn", ("add",), filter_yarn_install,
                      "Compact yarn add output"),
        test=_filtered("yarn test", "yarn", ("test",), filter_yarn_test,
                       "Compact yarn test output"),
    ),
}


def _command_list(commands: dict[str, _Command]) -> str:
    width = max(len(name) for name in commands)
    return "\n".join(
        f"  {name:<{width}}  {cmd.short}" for name, cmd in sorted(commands.items())
    )


def _flags_help() -> str:
    return f"Flags:\n  -h, --help      help\n  -v, --verbose   {_VERBOSE_HELP}"


def _root_help() -> str:
    return (
        f"{_LONG}\n\nUsage:\n  syt [command]\n\nAvailable Commands:\n"
        f"{_command_list(_COMMANDS)}\n\n{_flags_help()}"
    )


def _group_help(name: str, command: _Command) -> str:
    return (
        f"{command.short}\n\nUsage:\n  syt {name} [command]\n\nAvailable Commands:\n"
        f"{_command_list(command.subcommands)}\n\n{_flags_help()}"
    )


def _root_flags(args: list[str]) -> tuple[int, list[str], bool]:
    """Consume leading root flags; return verbosity, the rest and whether help was asked."""
    verbose = 0
    rest = list(args)
    while rest and rest[0].startswith("-"):
        token = rest.pop(0)
        if token in ("-h", "--help"):
            return verbose, rest, True
        if token == "--verbose":
            verbose += 1
        elif _SHORT_VERBOSE_RE.fullmatch(token):
            verbose += len(token) - 1
        else:
            raise _CommandError(f"unknown flag: {token}")
    return verbose, rest, False


def _dispatch(args: list[str]) -> int:
    verbose, rest, want_help = _root_flags(args)
    if want_help or not rest or rest[0] == "help":
        print(_root_help())
        return 0

    name, *tail = rest
    command = _COMMANDS.get(name)
    if command is None:
        raise _CommandError(f'unknown command "{name}" for "syt"')

    if command.subcommands:
        if not tail or tail[0] not in command.subcommands:
            print(_group_help(name, command))
            return 0
        command = command.subcommands[tail[0]]
        tail = tail[1:]

    assert command.run is not None
    return command.run(tail, verbose)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit code."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        return _dispatch(args)
    except _Exit as exc:
        return exc.code
    except _CommandError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())