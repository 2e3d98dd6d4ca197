[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rhino"
version = "0.1.0"
description = "Building blocks for message-driven services: mailboxes, binary buffers, events, sync channels and structured logging."
requires-python = ">=3.10"
dependencies = []
keywords = ["mailbox", "message", "buffer", "binary", "event", "logging", "ini"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["rhino"]

[tool.pytest.ini_options]
addopts = "-ra"
