[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qedit"
version = "0.1.0"
description = "Core pieces of a modal terminal text editor: undo trees, undo files, themes and a file-tree sidebar model"
requires-python = ">=3.10"
dependencies = []
keywords = ["editor", "undo", "undo-tree", "theme", "ansi", "file-tree", "terminal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["qedit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
