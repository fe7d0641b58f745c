from setuptools import setup, find_packages

setup(
    name="adaptsift",
    version="1.0.0",
    description="Adaptive SIFT feature extraction on a shared engine",
    author="NovaVista",
    packages=find_packages(include=["adaptsift", "adaptsift.*"]),
    install_requires=[
        "opencv-python>=4.8.0",
        "numpy>=1.24.0",
        "scikit-image>=0.21.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
)
