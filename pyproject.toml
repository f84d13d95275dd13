[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tihex"
version = "2022.3.2"
description = "Edit bytes in Intel HEX files while keeping their original line layout."
requires-python = ">=3.10"
dependencies = []
keywords = ["intel-hex", "hex", "firmware", "embedded", "editor"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tihex = "tihex.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tihex"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
