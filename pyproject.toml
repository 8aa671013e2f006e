[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gravsim"
version = "0.1.0"
description = "Real-time N-body gravity simulator with an interactive 3D view and a command console"
requires-python = ">=3.10"
keywords = ["gravity", "n-body", "simulation", "physics", "solar system", "orbits"]
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
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Education",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gravsim = "gravsim.main:main"

[tool.hatch.build.targets.wheel]
packages = ["gravsim"]

[tool.pytest.ini_options]
addopts = "-ra"
