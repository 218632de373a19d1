"""Rules that map shell commands to their token-optimised equivalents."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum


class Category(StrEnum):
    """Kind of tool a command belongs to."""

    GIT = "git"
    BUILD = "build"
    TEST = "test"
    LINT = "lint"
    PACKAGE = "package"
    FILE = "file"
    CONTAINER = "container"
    GITHUB = "github"


class Kind(StrEnum):
    """How a command is classified."""

    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"
    IGNORED = "ignored"


@dataclass
class Rule:
    """A single rewrite rule.

    ``prefix`` is the command as typed (for example ``"git log"``); it matches
    when its words are followed by whitespace or the end of the command.
    ``target`` is what replaces the prefix; the remaining arguments are kept.
    """

    prefix: str
    target: str
    category: Category
    saves_pct: int
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        words = r"\s+".join(re.escape(word) for word in self.prefix.split())
        self.pattern = re.compile(rf"^{words}(?:\s|\Z)", re.ASCII)

    def matches(self, cmd: str) -> bool:
        """Return True if ``cmd`` is handled by this rule."""
        return self.pattern.search(cmd) is not None

    def rewrite(self, cmd: str) -> str:
        """Return the rewritten form of ``cmd``."""
        return self.target + _extract_args(cmd, self.prefix)


def _extract_args(full: str, prefix: str) -> str:
    """Return the arguments after ``prefix``, with a leading space, or ""."""
    if full.startswith(prefix):
        rest = full[len(prefix):]
        if not rest:
            return ""
        return " " + rest.strip()
    words = full.split()
    prefix_len = len(prefix.split())
    if len(words) <= prefix_len:
        return ""
    return " " + " ".join(words[prefix_len:])


def _rule(prefix: str, target: str, category: Category, saves_pct: int) -> Rule:
    return Rule(prefix=prefix, target=target, category=category, saves_pct=saves_pct)


_G, _B, _T, _L = Category.GIT, Category.BUILD, Category.TEST, Category.LINT
_P, _F, _C, _H = Category.PACKAGE, Category.FILE, Category.CONTAINER, Category.GITHUB

RULES: tuple[Rule, ...] = (
    # Git
    _rule("git log", "syt git log", _G, 80),
    _rule("git diff", "syt git diff", _G, 75),
    _rule("git status", "syt git status", _G, 80),
    _rule("git add", "syt git add", _G, 90),
    _rule("git commit", "syt git commit", _G, 90),
    _rule("git push", "syt git push", _G, 90),
    _rule("git pull", "syt git pull", _G, 90),
    _rule("git fetch", "syt git fetch", _G, 90),
    _rule("git branch", "syt git branch", _G, 70),
    _rule("git stash", "syt git stash", _G, 70),
    _rule("git worktree", "syt git worktree", _G, 70),
    # Go
    _rule("go test", "syt go test", _T, 90),
    _rule("go build", "syt go build", _B, 80),
    _rule("go vet", "syt go vet", _L, 70),
    _rule("go run", "syt go run", _B, 60),
    # Cargo
    _rule("cargo test", "syt cargo test", _T, 90),
    _rule("cargo build", "syt cargo build", _B, 80),
    _rule("cargo clippy", "syt cargo clippy", _L, 75),
    _rule("cargo check", "syt cargo check", _B, 75),
    _rule("cargo run", "syt cargo run", _B, 60),
    # pnpm
    _rule("pnpm list", "syt pnpm list", _P, 70),
    _rule("pnpm install", "syt pnpm install", _P, 80),
    _rule("pnpm outdated", "syt pnpm outdated", _P, 70),
    _rule("pnpm add", "syt pnpm add", _P, 80),
    # npm
    _rule("npm install", "syt npm install", _P, 80),
    _rule("npm run", "syt npm run", _B, 70),
    _rule("npm test", "syt npm test", _T, 85),
    # pip / uv
    _rule("pip install", "syt pip install", _P, 80),
    _rule("pip list", "syt pip list", _P, 70),
    _rule("pip outdated", "syt pip outdated", _P, 70),
    _rule("uv pip install", "syt pip install", _P, 80),
    _rule("uv pip list", "syt pip list", _P, 70),
    # TypeScript / JavaScript
    _rule("tsc", "syt tsc", _B, 83),
    _rule("eslint", "syt lint eslint", _L, 75),
    _rule("biome check", "syt lint biome", _L, 75),
    _rule("vitest run", "syt vitest", _T, 99),
    _rule("vitest", "syt vitest", _T, 99),
    _rule("next build", "syt next build", _B, 85),
    _rule("next dev", "syt next dev", _B, 80),
    _rule("prisma migrate", "syt prisma migrate", _B, 70),
    _rule("prisma generate", "syt prisma generate", _B, 70),
    _rule("prettier --check", "syt lint prettier", _L, 75),
    # Python
    _rule("pytest", "syt pytest", _T, 90),
    _rule("ruff check", "syt ruff check", _L, 75),
    _rule("ruff format", "syt ruff format", _L, 70),
    _rule("mypy", "syt lint mypy", _L, 75),
    # GitHub CLI
    _rule("gh pr view", "syt gh pr view", _H, 70),
    _rule("gh pr list", "syt gh pr list", _H, 70),
    _rule("gh issue view", "syt gh issue view", _H, 70),
    _rule("gh issue list", "syt gh issue list", _H, 70),
    _rule("gh run view", "syt gh run view", _H, 70),
    _rule("gh run list", "syt gh run list", _H, 70),
    # Files
    _rule("grep", "syt grep", _F, 70),
    _rule("rg", "syt rg", _F, 70),
    _rule("ls -la", "syt ls", _F, 60),
    _rule("ls", "syt ls", _F, 60),
    _rule("find", "syt grep", _F, 60),
    _rule("cat", "syt read", _F, 60),
    _rule("bat", "syt read", _F, 65),
    # Containers
    _rule("docker ps", "syt docker ps", _C, 70),
    _rule("docker build", "syt docker build", _C, 80),
    _rule("docker logs", "syt docker logs", _C, 70),
    # Make
    _rule("make test", "syt make test", _T, 80),
    _rule("make build", "syt make build", _B, 75),
    _rule("make install", "syt make install", _B, 75),
    _rule("make lint", "syt make lint", _L, 75),
    # Yarn
    _rule("yarn install", "syt yarn install", _P, 80),
    _rule("yarn add", "syt yarn add", _P, 80),
    _rule("yarn test", "syt yarn test", _T, 85),
    # Bun
    _rule("bun install", "syt bun install", _P, 80),
    _rule("bun test", "syt bun test", _T, 90),
    _rule("bun run", "syt bun run", _B, 70),
    # Poetry
    _rule("poetry install", "syt poetry install", _P, 80),
    _rule("poetry add", "syt poetry add", _P, 75),
    # Jest
    _rule("jest", "syt jest", _T, 90),
    # Nx
    _rule("nx test", "syt nx test", _T, 80),
    _rule("nx build", "syt nx build", _B, 80),
    # Playwright
    _rule("npx playwright", "syt playwright", _T, 94),
    _rule("playwright", "syt playwright", _T, 94),
)

_IGNORED_PREFIXES = (
    "syt", "#", "cd ", "cd\t", "pwd", "echo ", "echo\t", "export ",
    "source ", ". ", "env ", "env\t",
)

_IGNORED_EXACT = frozenset({"cd", "pwd", "echo", "export", "source", ".", "env"})


@dataclass(frozen=True)
class Classification:
    """Classification of a command and, when supported, its rewrite."""

    kind: Kind
    syt_cmd: str | None = None
    category: Category | None = None
    saves_pct: int = 0


def _is_ignored(cmd: str) -> bool:
    """Return True if the command must never be rewritten."""
    words = cmd.split()
    if not words:
        return True
    if words[0] in _IGNORED_EXACT:
        return True
    if any(cmd == p.rstrip(" \t") or cmd.startswith(p) for p in _IGNORED_PREFIXES):
        return True
    return "\n" in cmd


def _find_rule(cmd: str) -> Rule | None:
    return next((rule for rule in RULES if rule.matches(cmd)), None)


def rewrite_command(cmd: str, excluded: Iterable[str] | None = None) -> str | None:
    """Return the optimised equivalent of ``cmd``, or None if there is none."""
    cmd = cmd.strip()
    if _is_ignored(cmd):
        return None
    if any(cmd.startswith(prefix) for prefix in excluded or ()):
        return None
    rule = _find_rule(cmd)
    return rule.rewrite(cmd) if rule else None


def classify_command(cmd: str) -> Classification:
    """Classify ``cmd`` as supported, unsupported or ignored."""
    cmd = cmd.strip()
    if not cmd:
        return Classification(Kind.IGNORED)
    if cmd == "syt" or cmd.startswith("syt "):
        return Classification(Kind.IGNORED, syt_cmd=cmd)
    if _is_ignored(cmd):
        return Classification(Kind.IGNORED)
    rule = _find_rule(cmd)
    if rule is None:
        return Classification(Kind.UNSUPPORTED)
    return Classification(
        Kind.SUPPORTED,
        syt_cmd=rule.rewrite(cmd),
        category=rule.category,
        saves_pct=rule.saves_pct,
    )