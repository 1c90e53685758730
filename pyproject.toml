[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cachesim"
version = "0.1.0"
description = "Trace-driven cache simulator with LRU, NRU and SRRIP replacement, plus two-level, victim cache and prefetching set models"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "cache",
    "simulator",
    "lru",
    "nru",
    "srrip",
    "victim-cache",
    "prefetch",
    "computer-architecture",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cachesim = "cachesim.main:main"

[tool.hatch.build.targets.wheel]
packages = ["cachesim"]

[tool.pytest.ini_options]
addopts = "-ra"
