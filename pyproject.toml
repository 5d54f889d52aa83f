[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wxkeyscan"
version = "0.1.10"
description = "Find SQLCipher keys for local WeChat 4.x databases by scanning process memory on Linux"
requires-python = ">=3.10"
dependencies = []
keywords = ["wechat", "sqlcipher", "key", "memory", "scanner", "forensics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wxkeyscan"]

[tool.hatch.build.targets.sdist]
include = ["wxkeyscan", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
