"""Setup configuration for ogh"""

from setuptools import setup, find_packages

setup(
    name="ogh",
    version="0.1.0",
    description=(
        "GitHub development helper: pull request review queue with readiness "
        "classification, and GitHub Actions build listings."
    ),
    author="ogh Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
        "rich>=13.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "ogh=ogh.main:main",
        ],
    },
)
