"""
Setup script for bloomcount.
"""

from setuptools import setup, find_packages

setup(
    name="bloomcount",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"bloomcount": ["py.typed"]},
    python_requires=">=3.8",
)
