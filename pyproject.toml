[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plugkit"
version = "0.1.0"
description = "Chat-bot plugin building blocks: a Wordle game, fun-test lookups and a galgame picture archive"
requires-python = ">=3.10"
keywords = ["chatbot", "wordle", "plugins", "galgame", "scraper", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Communications :: Chat",
    "Topic :: Games/Entertainment :: Puzzle Games",
]
dependencies = [
    "pillow",
    "requests",
    "lxml",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["plugkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
