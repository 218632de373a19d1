from syt.filters.yarn import filter_yarn_install, filter_yarn_test


def test_install_empty_reports_ok():
    assert filter_yarn_install("", "") == "install ok ✓\n"


def test_install_only_progress_reports_ok():
    stdout = "\n".join(
        [
            "yarn install v1.22.19",
            "[1/4] Resolving packages...",
            "[2/4] Fetching packages...",
            "info fsevents@2.3.2: The platform is incompatible.",
            "verbose 0.1 something",
        ]
    )
    assert filter_yarn_install(stdout, "") == "install ok ✓\n"


def test_install_keeps_summary_lines():
    lines = [
        "yarn add v1.22.19",
        "[3/4] Linking dependencies...",
        "success Saved 1 new dependency.",
        "warning react > loose-envify: deprecated",
        "Done in 2.31s.",
        "some unrelated chatter",
    ]
    out = filter_yarn_install("\n".join(lines), "")
    assert out.splitlines() == [lines[2], lines[3], lines[4]]
    assert out.endswith("\n")


def test_install_strips_whitespace_and_ansi():
    out = filter_yarn_install("   \x1b[32msuccess Saved lockfile.\x1b[0m   \n\n", "")
    assert out == "success Saved lockfile.\n"


def test_install_error_returns_everything():
    stdout = "yarn install v1.22.19\n[1/4] Resolving packages..."
    stderr = "error An unexpected error occurred."
    out = filter_yarn_install(stdout, stderr)
    assert out == stdout + "\n" + stderr


def test_install_err_bang_returns_everything():
    stdout = "npm ERR! code ENOENT"
    assert filter_yarn_install(stdout, "") == stdout


def test_test_strips_banner_lines():
    stdout = "> my-app@1.0.0 test\n> jest\n\nPASS src/a.test.js\nTests: 3 passed\n"
    out = filter_yarn_test(stdout, "")
    assert "my-app@1.0.0" not in out
    assert "> jest" in out
    assert "PASS src/a.test.js" in out
    assert out.endswith("Tests: 3 passed\n")


def test_test_includes_stderr():
    out = filter_yarn_test("PASS a.test.js", "FAIL b.test.js")
    assert out.splitlines() == ["PASS a.test.js", "FAIL b.test.js"]


def test_test_only_banner_returns_combined():
    stdout = "> pkg@1.0.0 test\n"
    assert filter_yarn_test(stdout, "") == stdout