"""
Setup script for qfactormath package.
"""

from setuptools import setup, find_packages

setup(
    name="qfactormath",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        # Core numerical dependencies
        "numpy>=1.20.0",
        "pandas>=1.3.0",
        "scipy>=1.7.0",
        
        # Records
        "pydantic>=2.0.0",
        
        # Utilities
        "pyyaml>=6.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'qfactormath=qfactormath.__main__:main',
        ],
    },
    description="Factor interaction and distinguishing-statement analysis for Q-methodology studies",
    keywords="q-methodology, factor analysis, distinguishing statements, clustering",
    python_requires=">=3.8",
)
