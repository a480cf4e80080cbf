[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubeview"
version = "0.1.0"
description = "A small raycasting first-person explorer for .cub maps, with doors, a minimap and an animated wand."
requires-python = ">=3.10"
keywords = ["raycasting", "raycaster", "game", "dda", "maze", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "numpy",
    "pillow",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cubeview = "cubeview.app:main"

[tool.hatch.build.targets.wheel]
packages = ["cubeview"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
