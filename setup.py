# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="plantocode",
    version="0.1.0",
    description="Directory trees, token estimates and Gemini requests for AI coding prompts",
    author="PlanToCode",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["plantocode*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.31",
        "tiktoken>=0.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'plantocode=plantocode.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
