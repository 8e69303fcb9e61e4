[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "conckit"
version = "0.1.0"
description = "Concurrent data structures and locks for threads: queue-based locks, a sequence lock, lock-coupled and lock-free lists, a queue and a stack"
requires-python = ">=3.10"
dependencies = []
keywords = ["concurrency", "locks", "lock-free", "seqlock", "linked-list", "queue", "stack"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["conckit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
