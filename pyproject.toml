[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "paqnet"
version = "0.1.0"
description = "A minimal TCP client and server exchanging length-prefixed messages and packages of values"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "socket", "protocol", "serialization", "client", "server"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
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
test = ["pytest"]

[project.scripts]
paqnet-client = "paqnet.client:main"
paqnet-server = "paqnet.server:main"

[tool.hatch.build.targets.wheel]
packages = ["paqnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
