from setuptools import setup, find_packages

setup(
    name="connect4bot",
    version="0.2.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "filelock",  # locking for the score ledger
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "connect4bot=connect4bot.interfaces.cli:main",
        ],
    },
)
