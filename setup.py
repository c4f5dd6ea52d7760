from setuptools import setup, find_packages

setup(
    name="serpent",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        # Core dependencies
        "flask",  # For the Battlesnake webhook service
        "python-dotenv>=1.0.0",  # For .env configuration of the service
        # Arena evaluation
        "tqdm",  # For benchmark progress bars
        "sympy",  # For reproducible per-game seeds
        "trueskill",  # For tournament ratings
    ],
    extras_require={
        "dev": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "serpent=serpent.server:main",
            "serpent-benchmark=eval.pairwise_benchmark:main",
            "serpent-tournament=eval.trueskill_tournament:main",
        ],
    },
    description="Single-ply move engine and webhook service for Battlesnake",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
