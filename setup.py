# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="dutree",
    version="1.0.0",
    description="Disk usage tree with hard-link aware aggregation",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["dutree", "dutree.*"]),
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'dutree=dutree.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
    ],
)
