[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "udpboard"
version = "0.1.0"
description = "A small UDP message board: a server that keeps posts in memory and an interactive client to read, publish, edit and delete them."
requires-python = ">=3.10"
dependencies = []
keywords = ["udp", "message board", "chat", "socket", "client", "server"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
udpboard-server = "udpboard.server:main"
udpboard-client = "udpboard.client:main"

[tool.hatch.build.targets.wheel]
packages = ["udpboard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
