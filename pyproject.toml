[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "syt"
version = "0.1.0"
description = "Command proxy that rewrites, filters and tracks the output of developer tools to save tokens"
requires-python = ">=3.11"
dependencies = []
keywords = ["cli", "proxy", "tokens", "filter", "pytest", "vitest", "tsc", "developer-tools"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
syt = "syt.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["syt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
