[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gasnode"
version = "0.1.0"
description = "Configuration handling, status pages, Wi-Fi state machine and a small deflate/inflate codec for a networked gas and climate sensor node"
requires-python = ">=3.10"
dependencies = []
keywords = ["sensor", "home-automation", "inflate", "deflate", "gzip", "configuration", "wifi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gasnode"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
