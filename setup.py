#!/usr/bin/env python3
"""Setup script for the WASM bytecode scanner."""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

setup(
    name="wasm-bytecode-scanner",
    version="0.1.0",
    author="wasm-bytecode-scanner contributors",
    description="Pre-load introspection of WebAssembly modules for Proxy-Wasm hosts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["server"],
    package_data={
        "wasm_bytecode_scanner": ["config.json"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Disassemblers",
    ],
    python_requires=">=3.8",
    install_requires=[
        # No external dependencies for core functionality
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "mypy>=1.0",
            "flask>=2.2",
        ],
        "server": [
            "flask>=2.2",  # For the inspection server
        ],
    },
    entry_points={
        "console_scripts": [
            "wasm-scanner=wasm_bytecode_scanner.cli:main",
        ],
    },
)
