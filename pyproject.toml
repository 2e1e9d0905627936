[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "guixinstall"
version = "0.1.0"
description = "Building blocks for installing Guix System: configuration, disk preparation and hardware checks"
requires-python = ">=3.10"
dependencies = []
keywords = ["guix", "installer", "partitioning", "luks", "system-setup"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Installation/Setup",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["guixinstall"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
