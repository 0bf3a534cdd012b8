#!/usr/bin/env python3
"""
Setup configuration for the Code 128 / GS1-128 Encoder
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="code128-gs1-encoder",
    version="1.0.0",
    author="Code128 Encoder Team",
    author_email="",
    description="Code 128 encoder with optimal table switching and a GS1-128 AI layer",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourrepo/code128-gs1-encoder",
    packages=find_packages(exclude=["tests", "tests.*", "docs", "examples", "scripts"]),
    include_package_data=True,
    python_requires=">=3.7",
    install_requires=[
        # No external dependencies for core functionality
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "code128-encode=code128_gs1.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Intended Audience :: Manufacturing",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
    ],
    keywords="code128 gs1-128 barcode encoder codewords application-identifier",
    project_urls={
        "Source": "https://github.com/yourrepo/code128-gs1-encoder",
        "Tracker": "https://github.com/yourrepo/code128-gs1-encoder/issues",
    },
)
