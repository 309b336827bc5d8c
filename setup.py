# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="gosp",
    version="0.1.0",
    description="A small typed S-expression language: lexer, type-checking parser and tree-walking evaluator",
    packages=find_namespace_packages(include=["gosp", "gosp.*", "gosp_lsp", "gosp_lsp.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol>=2023.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "hypothesis>=6",
        ],
    },
    entry_points={
        "console_scripts": [
            "gosp=gosp.__main__:main",
        ],
    },
    zip_safe=False,
)
