from setuptools import setup, find_packages

setup(
    name="connect4net",
    version="0.1.0",
    description="Connect Four for one terminal or two machines, with a self-play bot",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "gymnasium",
        "torch",  # PyTorch for the policy network
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "connect4net=connect4net.interfaces.cli:main",
        ],
    },
)
