# setup.py
from setuptools import setup, find_packages

setup(
    name="site_clipper",
    version="0.1.0",
    description="Recursive site crawler that clips page content into markdown records",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "readability-lxml>=0.8.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["site-clipper=site_clipper.cli:cli"],
    },
    python_requires=">=3.11",
)
