[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pongkernel"
version = "0.1.0"
description = "Pong driven by a pluggable interrupt handler table, with a framebuffer writer, a bump allocator, a frame allocator and an APIC model."
requires-python = ">=3.10"
dependencies = []
keywords = ["pong", "kernel", "framebuffer", "interrupts", "apic", "game"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pongkernel"]

[tool.pytest.ini_options]
addopts = "-ra"
