[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pirkit"
version = "0.1.0"
description = "Bookkeeping for a private information retrieval service: configuration, operators, batch files, batch metadata and timing profiles"
requires-python = ">=3.10"
dependencies = []
keywords = ["pir", "private information retrieval", "batching", "metadata", "profiling"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pirkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
