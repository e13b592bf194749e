from setuptools import setup, find_packages

setup(
    name="medreminder",
    version="0.1.0",
    packages=find_packages(include=["medreminder", "medreminder.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "alembic",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt==4.0.1",
        "python-multipart",
        "python-dotenv",
        "pydantic",
        "pydantic-settings",
        "email-validator",
        "celery",
        "prometheus-client",
        "prometheus-fastapi-instrumentator",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
