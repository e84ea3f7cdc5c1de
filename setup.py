from __future__ import annotations

import os

from setuptools import setup


def read_version() -> str:
    """Read the version, preferring the PKG_VERSION environment variable."""
    env_version = os.getenv("PKG_VERSION", "").strip()
    if env_version:
        return env_version.lstrip("v")
    return "1.0.0"


setup(
    name="unique-ips",
    version=read_version(),
    description="Count distinct IPv4 addresses in large files with a 2^32-bit bitmap.",
    long_description="Count distinct IPv4 addresses in large files with a 2^32-bit bitmap.",
    long_description_content_type="text/plain",
    packages=["unique_ips"],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=2.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={"console_scripts": ["unique-ips = unique_ips.__main__:main"]},
)
