"""
Setup script for sparse-rmq-lca
"""

from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="sparse-rmq-lca",
    version="1.0.0",
    author="sparse-rmq-lca Team",
    description="O(1) Range Minimum Queries with Sparse Tables and Euler-tour Lowest Common Ancestor",
    long_description=long_description,
    long_description_content_type="text/markdown",
    py_modules=[
        "log_pow",
        "representative",
        "sparse_table",
        "traversal",
        "lca",
        "config",
        "demo",
    ],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.24.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "black>=22.0.0",
            "flake8>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "rmq-lca-demo=demo:main",
        ],
    },
)
