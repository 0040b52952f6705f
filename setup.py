from setuptools import setup, find_packages

setup(
    name="dereader",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "numpy>=1.20.0",
        "click>=8.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dereader=dereader.cli:cli",
        ],
    },
    python_requires=">=3.8",
)
