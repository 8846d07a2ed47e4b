[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bsdcompat"
version = "0.1.0"
description = "BSD library routines: MD5 and SHA-512 digests, entropy gathering, sorting, number humanizing, network parsing and ICMP/ELF helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["bsd", "md5", "sha512", "entropy", "heapsort", "mergesort", "humanize", "inet", "icmp", "elf"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bsdcompat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
