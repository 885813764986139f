[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ringmark"
version = "0.1.0"
description = "Building blocks for detecting concentric-circle fiducial markers: edge points, gradient walks, ellipse growing and marker banks"
requires-python = ">=3.10"
keywords = [
    "fiducial",
    "marker",
    "concentric circles",
    "ellipse fitting",
    "computer vision",
    "edge detection",
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
    "Topic :: Scientific/Engineering :: Image Recognition",
]
dependencies = [
    "numpy",
    "scipy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ringmark-simulate = "ringmark.simulation:main"

[tool.hatch.build.targets.wheel]
packages = ["ringmark"]

[tool.hatch.build.targets.sdist]
include = [
    "ringmark",
    "tests",
    "README.md",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
