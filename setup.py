#!/usr/bin/env python3
"""wslprovision - Setup"""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="wslprovision",
    version="1.0.0",
    description="Idempotent WSL2 workstation provisioning",
    author="wslprovision Team",
    packages=find_packages(include=["wslprovision", "wslprovision.*"]),
    package_data={"wslprovision": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "wslprovision=wslprovision.main:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
