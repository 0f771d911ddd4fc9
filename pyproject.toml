[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ferrolab"
version = "0.1.0"
description = "A RESP codec, a small Redis-compatible server, thread-safe counters and a command-line toolbox"
requires-python = ">=3.10"
keywords = [
    "redis",
    "resp",
    "server",
    "metrics",
    "base64",
    "csv",
    "blake3",
    "ed25519",
    "encryption",
    "cli",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Security :: Cryptography",
    "Topic :: Utilities",
]
dependencies = [
    "cryptography",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
ferrolab-redis = "ferrolab.redis.server:main"
ferrolab-rcli = "ferrolab.rcli.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ferrolab"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
