[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "treasurehunt"
version = "0.1.0"
description = "Treasure hunt storage and scoring, with a monitor process and an interactive hub"
requires-python = ">=3.10"
dependencies = []
keywords = ["treasure", "hunt", "game", "monitor", "hub"]
classifiers = [
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: POSIX",
    "Environment :: Console",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
treasure-manager = "treasurehunt.manager:main"
treasure-monitor = "treasurehunt.monitor:main"
treasure-hub = "treasurehunt.hub:main"
calculate-score = "treasurehunt.score:main"

[tool.setuptools.packages.find]
include = ["treasurehunt*"]

[tool.pytest.ini_options]
addopts = "-ra"
