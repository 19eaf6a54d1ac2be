[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rocketlab"
version = "0.1.0"
description = "Rocket flight physics building blocks: atmosphere, structural design estimates, aerodynamics and a heuristic flow model"
requires-python = ">=3.10"
dependencies = []
keywords = ["rocket", "flight", "aerodynamics", "atmosphere", "physics", "runge-kutta"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rocketlab"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
