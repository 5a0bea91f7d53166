[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fehkit"
version = "0.1.0"
description = "Image listing, index sheets, key bindings and loading helpers for a lightweight image viewer"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["image", "viewer", "thumbnails", "index", "montage", "key bindings", "md5"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Viewers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
fehkit = "fehkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["fehkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
