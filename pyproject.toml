[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shiftxfer"
version = "0.1.0"
description = "A small TCP file transfer server and client with a byte-shift cipher over IPv4 and IPv6"
requires-python = ">=3.10"
dependencies = []
keywords = ["file transfer", "tcp", "ipv6", "socket", "cipher"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: File Sharing",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
shiftxfer-server = "shiftxfer.server:main"
shiftxfer-client = "shiftxfer.client:main"

[tool.hatch.build.targets.wheel]
packages = ["shiftxfer"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
