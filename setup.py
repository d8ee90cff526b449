"""Setup configuration for Song Library."""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="song-library",
    version="1.0.0",
    author="Song Library Team",
    description="Song catalogue service with a cache-coherent repository",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["song_library", "song_library.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110.0",
        "starlette>=0.36.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.5.0",
        "sqlalchemy[asyncio]>=2.0.25",
        "asyncpg>=0.29.0",
        "redis>=5.0.1",
        "httpx>=0.26.0",
        "prometheus_client>=0.19.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
        "psutil>=5.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "aiosqlite>=0.19.0",
        ],
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "pytest-cov>=4.1.0",
            "aiosqlite>=0.19.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "song-library=song_library.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="music songs lyrics library cache redis postgresql",
)
