"""
Setup script for the roping-engine package.

Installs the roping_engine package from src/ together with its SQL
schema, and registers the ``roping-engine`` console command.
"""

from setuptools import setup, find_packages

setup(
    name="roping-engine",
    version="1.0.0",
    description="Team-roping tournament draw, run-state and settlement engine",
    author="Arena Staff",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "roping_engine._store": ["schema.sql"],
    },
    entry_points={
        "console_scripts": [
            "roping-engine=roping_engine.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
