[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "prismengine"
version = "0.1.0"
description = "Game engine core pieces: a binary packet format, frame-based input state and a threaded audio manager."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "engine", "packet", "audio", "input", "serialization"]
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
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["prismengine*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
