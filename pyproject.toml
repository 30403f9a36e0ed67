[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "armtoolkit"
version = "0.1.0"
description = "A two-pass assembler and an emulator for a subset of the AArch64 instruction set"
requires-python = ">=3.10"
dependencies = []
keywords = ["aarch64", "arm", "assembler", "emulator", "instruction-set"]
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
    "Topic :: System :: Emulators",
    "Topic :: Software Development :: Assemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
armtoolkit-assemble = "armtoolkit.assembler.assemble:main"
armtoolkit-emulate = "armtoolkit.emulator.emulate:main"

[tool.hatch.build.targets.wheel]
packages = ["armtoolkit"]

[tool.pytest.ini_options]
addopts = "-ra"
