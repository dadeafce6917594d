"""
Setup configuration for polybar-manager.

Restarts polybar themes with monitor roles resolved from the X RandR topology.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = requirements_file.read_text().strip().split("\n") if requirements_file.exists() else []

# Read long description from README if it exists
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="polybar-manager",
    version="1.0.0",
    description="Polybar theme and bar launcher with RandR monitor role detection",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="polybar-manager contributors",
    keywords=["polybar", "i3", "randr", "x11", "status-bar"],
    packages=find_packages(include=["polybar_manager", "polybar_manager.*"]),
    install_requires=requirements,
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "polybar-manager=polybar_manager.__main__:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Desktop Environment :: Window Managers",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
        ],
    },
)
