#!/usr/bin/env python3
"""
Setup script for tabgraph.

tabgraph stores graphs as Polars node and edge tables and uses NetworkIt
for degree and core measures.
"""

from setuptools import setup, find_packages


def get_version():
    """Read ``__version__`` from src/tabgraph/__init__.py."""
    with open("src/tabgraph/__init__.py", "r", encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"\'')
    raise RuntimeError("__version__ not found in src/tabgraph/__init__.py")


setup(
    name="tabgraph",
    version=get_version(),
    description="Graphs stored as Polars node and edge tables, with NetworkIt-backed measures",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    python_requires=">=3.9",
    install_requires=[
        "networkit>=11.0",
        "polars>=1.0.0",
        "numpy>=1.24.0",
        "scipy>=1.10.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "ruff>=0.1.0",
            "black>=23.0",
            "mypy>=1.0",
        ],
    },
    zip_safe=False,
)
