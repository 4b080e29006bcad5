[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wheeldrive"
version = "0.1.0"
description = "S-curve motion profiles, PID velocity control and a binary command protocol for a two-wheel BLDC drive"
requires-python = ">=3.10"
keywords = [
    "motion control",
    "s-curve",
    "jerk limited",
    "trajectory",
    "pid",
    "bldc",
    "motor",
    "encoder",
    "robotics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "matplotlib",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
wheeldrive-profile = "wheeldrive.profile_demo:main"

[tool.hatch.build.targets.wheel]
packages = ["wheeldrive"]

[tool.hatch.build.targets.sdist]
include = [
    "wheeldrive",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
