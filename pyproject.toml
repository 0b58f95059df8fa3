[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "modelang"
version = "0.1.0"
description = "Interpreter for a small model programming language compiled to reverse Polish notation"
requires-python = ">=3.10"
dependencies = []
keywords = ["interpreter", "compiler", "recursive-descent", "reverse-polish-notation", "education"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
modelang = "modelang.interpreter:main"

[tool.hatch.build.targets.wheel]
packages = ["modelang"]

[tool.pytest.ini_options]
addopts = "-ra"
