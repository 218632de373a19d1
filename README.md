# syt

`syt` is a command proxy for AI coding assistants. It runs common developer
tools, condenses their output to what matters (failures, errors and a
summary), and records how many tokens were saved in a local SQLite database.

## Installation

```
pip install .
```

## Commands

Rewrite a shell command into its token-optimized equivalent. The rewritten
command is printed; the exit status is 1 when there is nothing to rewrite
(shell builtins, comments, multi-line input, commands already starting with
`syt`, commands matching `exclude_commands` in the `[hooks]` config section):

```
syt rewrite "git log -10"
```

Run a command unchanged, passing its input and output straight through, and
record that it was run:

```
syt proxy make deploy
```

Run a tool and print its condensed output. The exit status of the tool is
passed on:

```
syt pytest -x tests/
syt tsc --noEmit
syt vitest
syt playwright
syt ruff check .
syt ruff format .
syt pnpm list
syt pnpm install
syt pnpm outdated
syt pnpm add react
syt yarn install
syt yarn add react
syt yarn test
syt poetry install
syt poetry add requests
syt prisma migrate deploy
syt prisma generate
syt read --max-lines 50 notes.txt
syt cat notes.txt
```

`syt vitest` runs `vitest run` when given no arguments; `syt playwright`
runs `npx playwright test`; the prisma commands run through `npx`. `read`
and `cat` show the file with line numbers, cut after `--max-lines` lines
(200 by default). Add `-v` (repeatable) before the command for more
verbosity, and `-h` or `syt help` for the list of commands.

If a filter fails, or returns nothing while the tool printed something, the
raw output is shown instead.

## Output filters as a library

The filters live in `syt.filters` and take the raw standard output and
standard error of a tool, returning the condensed text:

```python
from syt.filters.pytest_filter import filter_pytest
from syt.filters.tsc import filter_tsc

print(filter_tsc(raw_stdout, raw_stderr))
```

Available: `playwright.filter_playwright`, `pnpm.filter_pnpm_list`,
`pnpm.filter_pnpm_install`, `pnpm.filter_pnpm_outdated`,
`poetry.filter_poetry_install`, `prisma.filter_prisma`,
`pytest_filter.filter_pytest`, `ruff.filter_ruff_check`,
`ruff.filter_ruff_format`, `tsc.filter_tsc`, `vitest.filter_vitest`,
`yarn.filter_yarn_install`, `yarn.filter_yarn_test` and
`read.filter_read(stdout, stderr, max_lines)`.

Other modules usable from Python:

- `syt.registry` – `rewrite_command` and `classify_command`, with the rule
  table `RULES`.
- `syt.tracker` – `Tracker`, the SQLite store, with `track`, `get_summary`,
  `get_history`, `get_daily_stats` and `cleanup`.
- `syt.discover` – `analyze` scans assistant session logs (`*.jsonl` under
  `~/.claude/projects` via `ClaudeCodeProvider`) and classifies the Bash
  commands found; `syt.report` formats the result with `format_text` or
  `format_json`.
- `syt.integrity` – `store`, `load` and `verify` a SHA-256 hash of a hook
  script.
- `syt.runner` – `Runner.run_with_filter` runs a command and prints its
  filtered output.

## Configuration

Settings are read from `config.toml` in the platform configuration directory
(for example `~/.config/syt/config.toml` on Linux), with sections
`[tracking]`, `[hooks]`, `[tee]` and `[display]`. Environment variables
override them:

- `SYT_DB_PATH` – absolute path of the tracking database (by default
  `syt.db` in the platform data directory)
- `SYT_TEE=0` – do not save raw output of failed commands
- `SYT_TEE_DIR` – directory for saved raw output
- `SYT_TEE_MODE` – tee mode (`failures` by default)
- `SYT_NO_COLOR=1` – sets `display.colors` to false

When a filtered command exits with a non-zero status and its output is at
least 500 bytes, the raw output is saved to a log file (the oldest are
deleted beyond `max_files`) and its location is shown as
`[full output: ...]`.

## What it does not do

- `syt rewrite` also produces commands such as `syt git log`, `syt go test`,
  `syt cargo build`, `syt npm install`, `syt pip install`, `syt grep`,
  `syt ls`, `syt docker ps`, `syt gh pr view`, `syt lint ...`, `syt jest`,
  `syt make ...`, `syt bun ...`, `syt nx ...` and `syt next ...`; this
  package has no such commands.
- There is no command to install the assistant hook, to show token savings
  statistics, or to run session discovery; those are available only through
  the Python modules above.
- `syt uninstall` is not provided.