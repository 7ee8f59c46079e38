[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xopnet"
version = "0.1.0"
description = "A small event-driven TCP networking toolkit: schedulers, timers, buffers and connections."
requires-python = ">=3.10"
dependencies = []
keywords = ["networking", "event-loop", "tcp", "reactor", "timer", "h264"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Operating System :: Microsoft :: Windows",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["xopnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
