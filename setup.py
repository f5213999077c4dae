from setuptools import setup, find_packages

setup(
    name="joker-cli",
    version="0.1.0",
    description="CLI client that registers remote daemons and ships containers to the active one",
    license="MIT",
    packages=find_packages(include=["joker", "joker.*"]),
    install_requires=[
        "typer>=0.12.0",
        "rich>=13.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "joker=joker.main:joker",
        ],
    },
    python_requires=">=3.10",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
