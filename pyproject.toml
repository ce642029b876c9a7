[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nachoskit"
version = "0.1.0"
description = "Teaching operating-system toolkit: a MIPS interpreter and disassembler, COFF to NOFF/flat converters, file-system building blocks and small data-structure examples."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "mips",
    "emulator",
    "interpreter",
    "disassembler",
    "coff",
    "noff",
    "operating-systems",
    "education",
    "filesystem",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Software Development :: Disassemblers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nachos-stack-demo = "nachoskit.stacks:main"
nachos-template-stack-demo = "nachoskit.boundedstack:main"
coff2noff = "nachoskit.noff:main"
coff2flat = "nachoskit.flat:main"
nachos-mips = "nachoskit.interpreter:main"
nachos-disasm = "nachoskit.disasm_tool:main"

[tool.hatch.build.targets.wheel]
packages = ["nachoskit"]

[tool.hatch.build.targets.sdist]
include = ["nachoskit", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
