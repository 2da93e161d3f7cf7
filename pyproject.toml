[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "posish"
version = "0.1.0"
description = "Core of a POSIX shell: syntax tree, parser over tokens, variables, traps and shell options"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "posix", "parser", "sh", "variables", "traps", "ast"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["posish"]

[tool.pytest.ini_options]
addopts = "-ra"
