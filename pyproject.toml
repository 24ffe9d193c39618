[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mtproto"
version = "0.1.0"
description = "MTProto building blocks: TL primitives, transport framing, plain messages, sessions and handshake maths"
requires-python = ">=3.10"
keywords = ["mtproto", "tl", "protocol", "framing", "serialization"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mtproto"]

[tool.pytest.ini_options]
addopts = "-ra"
