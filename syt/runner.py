"""Running a command and printing its filtered output."""

from __future__ import annotations

import contextlib
import sqlite3
import subprocess
import sys
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from syt.tee import Tee
from syt.tracker import Record, Tracker
from syt.utils import combine_output, count_tokens

_TEE_THRESHOLD = 500

FilterFn = Callable[[str, str], str]


@dataclass
class Runner:
    """Runs commands, filters their output and records the savings."""

    verbose: int = 0
    tracker: Tracker | None = None
    tee: Tee | None = None

    def run_with_filter(
        self,
        cmd_name: str,
        binary: str,
        args: Sequence[str],
        filter_fn: FilterFn,
    ) -> int:
        """Run ``binary`` with ``args``, print the filtered output and return the exit code.

        If the filter raises, or returns nothing while there was output, the raw
        output is printed instead. A failing command with large output has its raw
        output saved by the tee. Raises OSError if the command cannot be started.
        """
        start = time.monotonic()
        completed = subprocess.run(
            [binary, *args],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            check=False,
        )
        elapsed_ms = int((time.monotonic() - start) * 1000)

        exit_code = completed.returncode
        if exit_code < 0:
            exit_code = 1

        raw_stdout = completed.stdout.decode("utf-8", errors="replace")
        raw_stderr = completed.stderr.decode("utf-8", errors="replace")
        raw_combined = combine_output(raw_stdout, raw_stderr)

        try:
            filtered: str | None = filter_fn(raw_stdout, raw_stderr)
        except Exception:
            filtered = None
        if filtered is None or (not filtered and raw_combined):
            filtered = raw_combined

        sys.stdout.write(filtered)
        if filtered and not filtered.endswith("\n"):
            sys.stdout.write("\n")

        if (
            exit_code != 0
            and len(raw_combined.encode("utf-8")) >= _TEE_THRESHOLD
            and self.tee is not None
        ):
            file_path = self.tee.save(raw_combined, cmd_name, exit_code)
            if file_path:
                print(self.tee.hint(file_path))

        if self.tracker is not None:
            record = Record(
                original_cmd=cmd_name,
                syt_cmd=f"syt {cmd_name}",
                input_tokens=count_tokens(raw_combined),
                output_tokens=count_tokens(filtered),
                execution_ms=elapsed_ms,
            )
            with contextlib.suppress(sqlite3.Error):
                self.tracker.track(record)

        sys.stdout.flush()
        return exit_code