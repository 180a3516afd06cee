[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xvtools"
version = "0.1.0"
description = "Small Unix-style command-line tools, a shell command parser, a toy allocator and file-system checks"
requires-python = ">=3.10"
dependencies = []
keywords = ["unix", "utilities", "grep", "wc", "shell", "elf", "allocator", "filesystem"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xv-cat = "xvtools.cat:main"
xv-echo = "xvtools.echo:main"
xv-grep = "xvtools.grep:main"
xv-wc = "xvtools.wc:main"
xv-primes = "xvtools.primes:main"
xv-find = "xvtools.find:main"
xv-ls = "xvtools.ls:main"
xv-stressfs = "xvtools.stressfs:main"

[tool.hatch.build.targets.wheel]
packages = ["xvtools"]

[tool.pytest.ini_options]
addopts = "-ra"
