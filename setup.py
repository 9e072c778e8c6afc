"""Setup script for the linesense package."""

from setuptools import find_packages, setup

setup(
    name="linesense",
    version="0.1.0",
    description="Power-line telemetry classification and grid status engine",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "linesense.topology": ["data/*.yaml"],
    },
    python_requires=">=3.9",
    install_requires=[
        "pyyaml",
        "python-dotenv",
        "paho-mqtt>=2.0.0",
        "aiohttp",
        "rich",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-asyncio",
            "black",
            "isort",
            "mypy",
        ],
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "linesense-monitor=linesense.monitor:main",
            "linesense-display=linesense.display:main",
        ],
    },
)
