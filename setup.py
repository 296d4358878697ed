"""
Setup script for dogdog-trivia-core.

The content and progression engine behind the DogDog trivia game:

1. Content Delivery - tiered loading and an LRU category cache
2. Adaptive Selection - difficulty tiers from live player signals
3. Progression - checkpoint rewards and game-over recovery

The 'trivia' command is a developer CLI for inspecting content, drawing
question batches and simulating checkpoint fallbacks.
"""

from setuptools import find_packages, setup

setup(
    name="dogdog-trivia-core",
    version="1.0.0",
    description="Adaptive content delivery and progression engine for a dog trivia game",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="DogDog Trivia",
    packages=find_packages(include=["trivia_core", "trivia_core.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "trivia=trivia_core.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Games/Entertainment :: Puzzle Games",
    ],
    keywords="trivia quiz adaptive-difficulty education children",
)
