[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smux"
version = "0.1.0"
description = "Stream multiplexing over a single reliable connection, speaking the smux wire protocol on asyncio"
requires-python = ">=3.10"
dependencies = []
keywords = ["smux", "multiplexing", "asyncio", "streams", "protocol"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["smux"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
