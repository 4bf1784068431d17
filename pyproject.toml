[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shrimpy"
version = "0.1.0"
description = "Path tracer scene building: vectors, scene types with GPU byte layouts, BVH construction, OBJ mesh loading and tone-mapped PNG output"
requires-python = ">=3.10"
keywords = ["path tracing", "ray tracing", "bvh", "obj", "rendering", "tonemapping"]
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
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
shrimpy = "shrimpy.app:main"

[tool.hatch.build.targets.wheel]
packages = ["shrimpy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
