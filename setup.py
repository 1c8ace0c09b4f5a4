"""
Setup script for the instance_filters package.
"""
from setuptools import setup, find_packages

setup(
    name="instance-filters",
    version="0.1.0",
    packages=find_packages(include=["instance_filters", "instance_filters.*"]),
    install_requires=[
        "numpy",
        "pandas",
        "scikit-learn",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "mypy",
            "isort",
            "flake8",
        ],
        "test": [
            "pytest",
            "pytest-cov",
        ],
        "polars": [
            "polars",
            "pyarrow",
        ],
    },
    python_requires=">=3.8",
)
