[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "platformer"
version = "0.1.0"
description = "Platformer game logic: player action state machine, movement physics, follow camera, mouse state tracking and sprite animation."
requires-python = ">=3.10"
keywords = ["game", "platformer", "physics", "animation", "camera", "sprite"]
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
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["platformer"]

[tool.pytest.ini_options]
addopts = "-ra"
