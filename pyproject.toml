[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "itfliesby"
version = "0.1.0"
description = "Core pieces of a small 2D game engine: arena memory, allocators, render batching maths, an asset file builder and a frame-budget estimator."
requires-python = ">=3.10"
keywords = [
    "game engine",
    "memory arena",
    "allocator",
    "asset pipeline",
    "rendering",
    "frame budget",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pillow",
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pillow",
]

[project.scripts]
itfliesby-guesstimater = "itfliesby.guesstimater:main"
itfliesby-asset-builder = "itfliesby.asset_builder:main"

[tool.hatch.build.targets.wheel]
packages = ["itfliesby"]

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
