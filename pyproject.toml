[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mdnumthm"
version = "0.2.0"
description = "An mdBook preprocessor that numbers theorems, lemmas, definitions and other environments and resolves references to them."
requires-python = ">=3.10"
dependencies = []
keywords = ["mdbook", "preprocessor", "markdown", "theorem", "numbering"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Markup :: Markdown",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mdbook-numthm = "mdnumthm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mdnumthm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
