from setuptools import setup, find_packages
import os

install_requires = ["lark>=1.1", "pydantic>=2.0"]

# Define optional dependencies for development
extras_require = {"dev": ["pytest"]}

setup(
    name="illoader",
    version="1.0.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "illoader = illoader.cli:main",
        ],
    },
    include_package_data=True,
    package_data={"illoader.script": ["*.lark"]},
    description="A module loader for IL scripts with content-signature caching and scoped search paths.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
