[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parlab"
version = "0.1.0"
description = "A task framework for parallel programming exercises: ordered task stages, timing, reference tasks and an in-process message-passing world"
requires-python = ">=3.10"
dependencies = []
keywords = ["parallel", "education", "tasks", "performance", "message-passing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
parlab-samples = "parlab.samples:main"

[tool.hatch.build.targets.wheel]
packages = ["parlab"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
