[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scorecheck"
version = "0.1.0"
description = "Security health checks that score a source repository's practices from 0 to 10"
requires-python = ">=3.10"
keywords = ["security", "supply-chain", "github", "code-review", "ci", "workflow-permissions"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Quality Assurance",
    "Topic :: Security",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["scorecheck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
