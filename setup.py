#!/usr/bin/env python3
"""
Setup script for the Gesture-Driven Molecule Viewer
"""

from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).parent


def read_requirements():
    """Read required packages from requirements.txt"""
    with open(ROOT / "requirements.txt", "r") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]


setup(
    name="molgesture",
    version="0.1.0",
    description="Manipulate a 3D molecule with free-hand gestures captured by a webcam",
    python_requires=">=3.9",
    packages=find_packages(include=["molgesture", "molgesture.*"]),
    install_requires=read_requirements(),
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "molgesture=molgesture.main:run",
        ],
    },
)
