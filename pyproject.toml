[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "srvctl"
version = "0.1.0"
description = "Building blocks for a command-line client that manages hosts, contexts and configuration of a dedicated-server hosting API"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "cli",
    "dedicated-server",
    "baremetal",
    "hosting",
    "infrastructure",
    "systems-administration",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["srvctl"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
