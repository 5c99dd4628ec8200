#!/usr/bin/env python3

# flake8: noqa: E501

from pathlib import Path

from setuptools import find_packages, setup


def get_version():
    """Read version from hyperfields/__init__.py"""
    try:
        with open("hyperfields/__init__.py") as f:
            for line in f:
                if line.startswith("__version__"):
                    return line.split("=")[1].strip().strip('"').strip("'")
    except OSError:
        pass
    return "2.0.0"


def _collect_package_files(*directories: str):
    """Collect package data files relative to the hyperfields package."""
    collected = []
    package_root = Path("hyperfields")
    for directory in directories:
        root = Path(directory)
        if not root.exists():
            continue
        for path in root.rglob("*"):
            if path.is_file():
                try:
                    relative = path.relative_to(package_root)
                except ValueError:
                    # Skip files outside package root
                    continue
                collected.append(str(relative))
    return collected


# Base dependencies
base_deps = [
    "fastapi[standard]>=0.115.0",
    "jinja2>=3.1.0",
    "markupsafe>=2.1.0",
    "beautifulsoup4>=4.12.3",
    "uvicorn>=0.30.0",
]

# Optional extras
extras_require = {
    "test": [
        "pytest>=8.0.0",
        "httpx>=0.27.0",
    ],
    "dev": [
        "black>=23.0.0",
        "isort>=5.12.0",
        "flake8>=6.0.0",
    ],
}

# Read long description
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except OSError:
    long_description = "Declarative option pages and typed fields for admin panels."

setup(
    name="hyperfields",
    version=get_version(),
    description="Declarative option pages and typed fields for admin panels.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="HyperFields contributors",
    packages=find_packages(include=["hyperfields", "hyperfields.*"]),
    include_package_data=True,
    package_data={
        "hyperfields": _collect_package_files(
            "hyperfields/templates",
            "hyperfields/static",
        ),
    },
    python_requires=">=3.10",
    install_requires=base_deps,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "hyperfields-server=hyperfields.server.app:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    ],
    keywords="settings options-page admin fields forms fastapi",
)
