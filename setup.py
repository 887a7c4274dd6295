#!/usr/bin/env python3
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Setup script for the daily word grid service.
"""

from setuptools import setup
from pathlib import Path

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="sanaharava-server",
    version="1.0.0",
    author="TrailLensCo",
    description="Daily word grid puzzle generation and checking",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    py_modules=[
        "ai_limiter",
        "ai_word_generator",
        "cache",
        "completion",
        "config",
        "dictionary",
        "game_generator",
        "game_service",
        "grid_packer",
        "logging_config",
        "models",
        "prompt_loader",
        "sanaharava",
        "storage",
        "word_selector",
        "word_validator",
    ],
    python_requires=">=3.10",
    install_requires=[
        "anthropic>=0.75.0",
        "pyyaml>=6.0.2",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "sanaharava=sanaharava:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Games/Entertainment :: Puzzle Games",
    ],
)
