"""
stubdriver Package Setup Configuration

This file defines the metadata and dependencies for the 'stubdriver'
package, a library that derives the test stubs and drivers a class needs
from UML sequence diagrams, a class diagram and a requirements
traceability matrix, and renders them as Java sources.

Key Components:
- Parsers for the traceability matrix (CSV) and Visual Paradigm XML exports
- Call graph derivation and stub/driver resolution
- Core dependencies: lxml, NumPy
- License: MIT License
"""

from setuptools import setup, find_packages

setup(
    name="stubdriver",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "lxml>=4.9.0",
        "numpy>=1.24.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    description="Stub and driver derivation from UML sequence and class diagrams",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Testing",
    ],
    python_requires=">=3.9",
)
