[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "r51vehicle"
version = "0.1.0"
description = "Vehicle CAN bus state tracking, climate and settings control, and message routing for the Nissan R51"
requires-python = ">=3.10"
dependencies = []
keywords = ["can", "canbus", "j1939", "automotive", "climate", "vehicle"]
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
    "Topic :: Software Development :: Embedded Systems :: Controller Area Network (CAN)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["r51vehicle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
