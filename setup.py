"""
Setup configuration for repolens.
"""

from setuptools import setup, find_packages
from pathlib import Path

README = Path(__file__).parent / "README.md"
long_description = README.read_text() if README.exists() else ""

setup(
    name="repolens",
    version="1.0.0",
    description="Repository acquisition and README extraction for repository quality metrics",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="repolens",
    python_requires=">=3.9",
    packages=find_packages(include=["repolens", "repolens.*"]),
    install_requires=[
        "click>=8.1.0",
        "python-dotenv>=1.0.0",
        "markdown-it-py>=3.0.0",
        "mdit-py-plugins>=0.4.0",
        "linkify-it-py>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "repolens=repolens.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Quality Assurance",
        "Topic :: Text Processing :: Markup :: Markdown",
    ],
)
