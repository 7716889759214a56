"""
Setup script for loom-learn.

Loom is a local-first learning graph core. It decides which learning
nodes unlock as prerequisites are met, which node to study next, and
when to review a node again using spaced repetition:

1. Unlock Resolver - prerequisite gating over an id-linked node graph
2. Review Scheduler - stage ladder over a configurable interval table
3. Next-Node Selector - due reviews, then new material, then continuation

Storage, search and sync are left to the caller through a small
document store interface.
"""

from setuptools import find_packages, setup

setup(
    name="loom-learn",
    version="0.1.0",
    description="Deterministic scheduling core for a personal learning graph",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["loom", "loom.*"]),
    python_requires=">=3.10",
    install_requires=[
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition knowledge-graph education",
)
