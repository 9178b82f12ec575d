[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "m68kcore"
version = "0.1.0"
description = "Building blocks of a Motorola 68000 CPU core: opcode decoding, ALU operations, instruction timings and exception bookkeeping"
requires-python = ">=3.10"
dependencies = []
keywords = ["m68k", "68000", "emulator", "cpu", "opcode", "alu"]
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
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["m68kcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
