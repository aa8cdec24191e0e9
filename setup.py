# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="agentspolicy",
    version="0.1.0",
    description="Resolve which nested AGENTS.md policy file governs a path",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["agentspolicy*"]),
    python_requires=">=3.9",
    install_requires=[
        "tiktoken",  # Token estimation of effective policies
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'agentspolicy=agentspolicy.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
