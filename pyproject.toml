[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "uplctool"
version = "0.1.0"
description = "Parse, pretty-print, convert and flat-encode Untyped Plutus Core programs"
requires-python = ">=3.10"
dependencies = []
keywords = ["plutus", "uplc", "cardano", "flat", "smart-contracts", "de-bruijn"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Environment :: Console",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
uplctool = "uplctool.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["uplctool"]

[tool.pytest.ini_options]
addopts = "-ra"
