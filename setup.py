#!/usr/bin/env python3
"""
Setup script for httpsocket-client
"""

from setuptools import setup, find_packages

setup(
    name="httpsocket-client",
    version="0.1.0",
    description="Client for asynchronous bidirectional messaging over HTTP",
    packages=find_packages(include=["httpsocket", "httpsocket.*", "httpsocket_client", "httpsocket_client.*"]),
    install_requires=[
        "httpx>=0.27",
        "click>=8.1.7",
        "typer>=0.12.3",
        "rich>=13.9.2",
        "PyYAML>=6.0.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.4.2",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        'console_scripts': [
            'httpsocket-client=httpsocket_client.cli:main',
        ],
    },
)
