from setuptools import find_packages, setup


setup(
    name="trajcon",
    version="0.1.0",
    description="Goal and collocation defect constraints with sparse Jacobians for trajectory NLPs",
    author="trajcon Authors",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "numpy>=1.22.0",
        "scipy>=1.9.0",  # approx_fprime with vector-valued functions, sparse COO assembly
        "casadi>=3.5.0",  # Symbolic dynamics models with exact Jacobians
        "matplotlib>=3.1.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Mathematics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    keywords="trajectory optimization, collocation, sparse jacobian, nonlinear programming",
)
