# setup.py
from setuptools import setup, find_packages

setup(
    name="sitemap_checker",
    version="0.1.0",
    description="Асинхронная проверка доступности URL из списков и sitemap.xml",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"sitemap_checker": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "jinja2>=3.1",
        "lxml>=4.9",
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
            "sitemap-checker=sitemap_checker.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
