[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "raftkit"
version = "0.1.0"
description = "Raft leader-side building blocks: follower progress tracking, in-flight flow control and message descriptions"
requires-python = ">=3.10"
dependencies = []
keywords = ["raft", "consensus", "replication", "distributed systems", "flow control"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["raftkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
