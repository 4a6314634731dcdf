"""Setup file for the hat overlay project."""

from setuptools import find_packages, setup

setup(
    name="hat-overlay",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "numpy",
        "opencv-python",
        "mediapipe",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.10",
)
