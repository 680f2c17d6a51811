[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kwire"
version = "0.1.0"
description = "Encoding and decoding of Kafka wire protocol requests and responses"
requires-python = ">=3.10"
dependencies = []
keywords = ["kafka", "protocol", "wire", "codec", "binary"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kwire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
