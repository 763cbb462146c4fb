from setuptools import setup, find_packages

# Use find_packages to automatically discover all packages
packages = find_packages(include=["ssm_rvs", "ssm_rvs.*"])

setup(
    name="ssm-rvs",
    version="0.1.0",
    description="Parallel random variates for LBA and piecewise LBA models",
    packages=packages,
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
        "numba",
        "tqdm",
        "pyyaml",
        "typer",
    ],
    extras_require={
        "jax": ["jax", "jaxlib"],
        "test": ["pytest", "scipy"],
    },
    entry_points={
        "console_scripts": [
            "ssm-rvs=ssm_rvs.cli.sample:app",
        ],
    },
)
