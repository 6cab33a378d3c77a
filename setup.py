#!/usr/bin/python3
# Setup file for git-rename-remote-branch
# Copyright (C) 2026 The git-rename-remote-branch authors
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

from setuptools import setup

tests_require: list[str] = []


setup(
    name="git-rename-remote-branch",
    version="0.1.0",
    description="Rename a branch on a remote git repository without fetching it",
    license="Apache-2.0 OR GPL-2.0-or-later",
    python_requires=">=3.9",
    packages=["rename_branch"],
    package_data={"": ["py.typed"]},
    install_requires=[],
    extras_require={"test": tests_require},
    entry_points={
        "console_scripts": [
            "git-rename-remote-branch=rename_branch.cli:_main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
        "Topic :: Software Development :: Version Control :: Git",
    ],
)
