from setuptools import find_packages, setup

setup(
    name="kelp-reader",
    version="0.1.0",
    description="Reader for a small Lisp: source text to cons-cell token trees",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "kelp = kelp.cli:main",
        ],
    },
)
