from setuptools import find_packages
from setuptools import setup

setup(
    name="laser-vaccine",
    version="0.1.0",
    description="Multi-dose vaccine rollout and protection for agent-based epidemic models",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    install_requires=[
        "click",
        "h5py",
        "numba",
        "numpy",
    ],
    extras_require={
        "test": [
            "pytest",
            "scipy",
        ],
    },
    entry_points={
        "console_scripts": [
            "laser-vaccine = laser_vaccine.cli:main",
        ],
    },
)
