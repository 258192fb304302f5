from setuptools import setup, find_packages

setup(
    name="settlement_tool",
    version="1.0.0",
    packages=find_packages(),
    install_requires=[
        "pandas>=1.3.0",
        "numpy>=1.20.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "settlement-cli=settlement_tool.cli.main:main",
        ],
    },
    python_requires=">=3.8",
    author="Settlement Tools",
    description="Settlement monitoring reports: extrema, relative settlement and cycle state timelines",
)
