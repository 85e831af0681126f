#!/usr/bin/env python3
"""
Setup script for Chess Puzzler.

A tool for turning recorded chess games into puzzles by locating the biggest
blunder of a game with Stockfish and extending it with the engine's solution.
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8') if (this_directory / "README.md").exists() else ""

# Read version from package
version_file = this_directory / "chess_puzzler" / "__init__.py"
version = "0.1.0"  # Default version
if version_file.exists():
    with open(version_file, encoding='utf-8') as f:
        for line in f:
            if line.startswith('__version__'):
                version = line.split('=')[1].strip().strip('"').strip("'")
                break

setup(
    name="chess-puzzler",
    version=version,
    description="Generate chess puzzles from recorded games using Stockfish",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Chess Puzzler Team",

    # Package discovery
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",

    # Dependencies
    install_requires=[
        "chess>=1.10.0",
        "rich>=13.0.0",
    ],

    # Optional dependencies
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "mypy>=1.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "isort>=5.0.0",
        ],
    },

    # Entry points for CLI
    entry_points={
        "console_scripts": [
            "chess-puzzler=chess_puzzler.cli:main",
        ],
    },

    # Classifiers
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Games/Entertainment :: Board Games",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],

    # Keywords
    keywords=[
        "chess",
        "puzzles",
        "pgn",
        "stockfish",
        "uci",
        "tactics",
    ],

    zip_safe=False,

    # Test configuration
    test_suite="tests",
    tests_require=[
        "pytest>=7.0.0",
    ],
)
