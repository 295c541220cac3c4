from setuptools import setup, find_packages

setup(
    name="finmodel",
    version="0.1.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "psycopg2-binary",
        "passlib",
        "python-dotenv",
        "pydantic",
        "pydantic-settings",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "finmodel=finmodel.cli:main",
        ],
    },
)
