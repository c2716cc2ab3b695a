[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mdcrdt"
version = "0.1.0"
description = "Conflict-free replicated data types for collaborative text: sequences, registers, maps and marks"
requires-python = ">=3.10"
dependencies = []
keywords = ["crdt", "collaborative", "sync", "rga", "lww", "offline-first"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["mdcrdt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
