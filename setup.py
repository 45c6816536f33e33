# setup.py
from setuptools import setup, find_packages

setup(
    name="unilisp",
    version="0.1.0",
    description="Embeddable Scheme-style Lisp interpreter with native function interop",
    packages=find_packages(include=["unilisp", "unilisp.*"]),
    package_data={"unilisp": ["prelude/*.lisp"]},
    python_requires=">=3.10",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
