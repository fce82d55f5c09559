#!/usr/bin/env python3
"""
Setup script for Chess Drill.

A tool for practising chess lines: PGN games sharing a starting position are
merged into one move tree and drilled move by move in the terminal.
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8') if (this_directory / "README.md").exists() else ""

# Read version from package
version_file = this_directory / "chess_drill" / "__init__.py"
version = "0.1.0"  # Default version
if version_file.exists():
    with open(version_file, encoding='utf-8') as f:
        for line in f:
            if line.startswith('__version__'):
                version = line.split('=')[1].strip().strip('"').strip("'")
                break

setup(
    name="chess-drill",
    version=version,
    description="Drill chess lines from a branching move tree",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Chess Drill Team",
    author_email="chess-drill@example.com",

    # Package discovery
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",

    # Dependencies
    install_requires=[
        "python-chess>=1.999",
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
            "chess-drill=chess_drill.cli:main",
        ],
    },

    # Classifiers
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Games/Entertainment :: Board Games",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
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
        "pgn",
        "opening",
        "repertoire",
        "training",
        "drill",
    ],

    zip_safe=False,

    # Test configuration
    test_suite="tests",
    tests_require=[
        "pytest>=7.0.0",
    ],
)
