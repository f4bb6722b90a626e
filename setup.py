from setuptools import setup, find_packages

setup(
    name="scratchtest",
    version="0.1.0",
    description="In-process test harness for ad-hoc scripts",
    packages=find_packages(include=["scratchtest", "scratchtest.*"]),
    install_requires=[
        "click>=8.0.0",
        "rich>=13.0.0",  # For nice terminal output
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "scratchtest=scratchtest.cli:main",
        ],
    },
    python_requires=">=3.11",
)
