[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minicc"
version = "1.0.1"
description = "Building blocks of a small C-subset compiler: syntax trees, AST graph rendering and an ARM64 assembly emitter"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "arm64", "aarch64", "assembly", "ast", "register-allocation", "graphviz"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["minicc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
