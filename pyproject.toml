[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "manypacker"
version = "1.0.3"
description = "Asset packer that gathers every raw file a CoD4 asset depends on into a mod folder or zip archive"
requires-python = ">=3.10"
dependencies = [
    "platformdirs",
]
keywords = ["cod4", "modding", "assets", "xmodel", "weapon", "packer", "mod.csv"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
    "Topic :: System :: Archiving :: Packaging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
manypacker = "manypacker.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["manypacker"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
