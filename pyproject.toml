[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chimera"
version = "0.1.0b1"
description = "Primitives, transforms, fabric topology, SHA-256 hashing and in-process messaging for a distributed mining compute fabric"
requires-python = ">=3.10"
dependencies = []
keywords = ["mining", "distributed", "hashing", "sha256", "topology", "pubsub", "asyncio"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Operating System :: OS Independent",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["chimera"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
