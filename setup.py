"""Install pod client package."""

from setuptools import setup, find_packages

setup(
    name='pod-client',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    install_requires=[
        "authlib",
        "cryptography",
        "pyjwt",
        "python-json-logger",
        "requests",
        "sqlalchemy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=False
)
