[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "promwrite"
version = "0.2.2"
description = "Batch metric samples and push them to Prometheus with the remote-write protocol (snappy-compressed protobuf)"
requires-python = ">=3.10"
dependencies = []
keywords = ["prometheus", "remote-write", "metrics", "monitoring", "snappy", "protobuf"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["promwrite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
