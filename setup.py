#! /usr/bin/env python3

from setuptools import setup, find_packages

import dispatch

setup(
    name = "deputy-dispatch-models",
    version = dispatch.__version__,
    packages = find_packages(include=["dispatch", "dispatch.*"]),
    scripts = ["resolve-revisions.py"],
    python_requires = ">=3.12",
    install_requires = [
        "colorlog",
    ],
    extras_require = {
        "test": [
            "pytest",
        ],
    },
)
