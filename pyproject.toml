[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sproutgen"
version = "0.0.5"
description = "Code generators for layered microservice projects, a .sprout API parser and a small ServiceID registry"
requires-python = ">=3.10"
keywords = ["code generation", "scaffolding", "microservices", "ddd", "registry"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]
dependencies = [
    "click>=8.1",
    "flask>=2.3",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
sprout-registry = "sproutgen.registry_server:main"

[tool.hatch.build.targets.wheel]
packages = ["sproutgen"]

[tool.hatch.build.targets.sdist]
include = ["sproutgen", "tests", "pyproject.toml"]

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
