"""
Monte Carlo Engine for Floating-Strike Lookback Options.
References:
    Glasserman, P. (2003). Monte Carlo Methods in Financial Engineering. Springer.
    Broadie, M., & Glasserman, P. (1996). Estimating Security Price
    Derivatives Using Simulation. Management Science.
"""
from setuptools import setup, find_packages

setup(
    name="lookback-mc",
    version="1.0.0",
    author="Jose Orlando Bobadilla Fuentes",
    description="MC pricing of lookback options with pathwise and CRN Greeks",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=["numpy>=1.24.0", "scipy>=1.10.0", "matplotlib>=3.7.0"],
    extras_require={
        "dev": ["pytest>=7.4.0", "black", "flake8"],
    },
    entry_points={
        "console_scripts": ["lookback-mc = lookback_mc.interface:main"],
    },
)
