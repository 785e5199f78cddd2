# setup.py
from setuptools import setup, find_packages

setup(
    name="page_analyzer",
    version="0.1.0",
    description="Page Analyzer: проверка сайтов и история SEO-проверок",
    packages=find_packages(include=["page_analyzer", "page_analyzer.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "SQLAlchemy[asyncio]>=2.0.25",
        "aiosqlite>=0.19",
    ],
    extras_require={
        "postgres": ["asyncpg>=0.29"],
        "test": ["pytest>=7.4", "pytest-asyncio>=0.23"],
    },
    entry_points={
        "console_scripts": ["page-analyzer=page_analyzer.cli:cli"],
    },
    python_requires=">=3.11",
)
