[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proxyprint"
version = "0.1.0"
description = "Project model, image bookkeeping and cutting-guide generation for printing proxy cards"
requires-python = ">=3.10"
dependencies = []
keywords = ["cards", "proxy", "printing", "layout", "cutting guides", "dxf", "svg"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Printing",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["proxyprint"]

[tool.pytest.ini_options]
addopts = "-ra"
