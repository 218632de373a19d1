from syt.filters.vitest import filter_vitest
from syt.utils import count_tokens

PASSING_RUN = "\n".join(
    [
        " ✓ src/parser.test.ts (4)",
        " ✓ src/lexer.test.ts (9)",
        "",
        " Test Files  2 passed (2)",
        "      Tests  13 passed (13)",
        "   Start at  09:15:42",
        "   Duration  0.57s",
        "",
    ]
)

FAILING_RUN = "\n".join(
    [
        " ✓ src/parser.test.ts (4)",
        " × src/lexer.test.ts (2)",
        "   × tokenize > handles escapes",
        "     AssertionError: expected 3 to equal 4",
        "",
        " Test Files  1 failed | 1 passed (2)",
        "      Tests  1 failed | 4 passed (5)",
        "   Duration  0.44s",
        "",
    ]
)


def test_empty():
    out = filter_vitest("", "")
    assert out == "0 tests passed ✓\n"


def test_all_pass():
    out = filter_vitest(PASSING_RUN, "")
    assert "passed" in out
    assert "FAIL" not in out
    assert out == "2 tests passed ✓ (Duration  0.57s)\n"


def test_with_failure():
    out = filter_vitest(FAILING_RUN, "")
    assert "failed" in out
    assert "src/parser.test.ts" not in out


def test_with_failure_layout():
    lines = filter_vitest(FAILING_RUN, "").splitlines()
    assert lines[0] == "× src/lexer.test.ts (2)"
    assert "× tokenize > handles escapes" in lines
    assert "     AssertionError: expected 3 to equal 4" in lines
    assert lines[-3:] == [
        "Test Files  1 failed | 1 passed (2)",
        "Tests  1 failed | 4 passed (5)",
        "Duration  0.44s",
    ]


def test_failure_output_is_shorter():
    out = filter_vitest(FAILING_RUN, "")
    assert count_tokens(out) < count_tokens(FAILING_RUN)


def test_ansi_is_stripped():
    out = filter_vitest("\x1b[32m ✓ a.test.ts (1)\x1b[0m\n", "")
    assert out == "1 tests passed ✓\n"


def test_stderr_failure_counted():
    out = filter_vitest(" ✓ a.test.ts (1)", " FAIL b.test.ts > broken")
    assert out.splitlines()[0] == "FAIL b.test.ts > broken"