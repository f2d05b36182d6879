[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "packrpc"
version = "0.1.0"
description = "Transport-agnostic RPC over MessagePack, with in-process and TCP transports"
requires-python = ">=3.10"
dependencies = ["msgpack"]
keywords = ["rpc", "msgpack", "messagepack", "tcp", "remote procedure call"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
packrpc = "packrpc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["packrpc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
