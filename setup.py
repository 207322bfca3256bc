# setup.py
from setuptools import setup, find_packages

setup(
    name="sitesweep",
    version="0.1.0",
    description="Аудит и глубокий обход сайтов в headless Chromium",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"sitesweep": ["report/templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "Jinja2>=3.1",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "sitesweep=sitesweep.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
