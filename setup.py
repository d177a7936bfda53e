#!/usr/bin/env python3
"""
Calculon Setup Script
=====================
Allows installation of the calculon package.

Usage:
    pip install -e .           # Development install
    pip install -e ".[test]"   # Development install with test tools
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="calculon",
    version="1.0.0",
    description="Shared accumulator server over a line-oriented TCP protocol",
    packages=find_packages(include=["calculon", "calculon.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "calculon=calculon.server:main",
        ],
    },
)
