from setuptools import setup, find_packages

setup(
    name="omi-demo-client",
    version="1.0.0",
    description="Command line demo client for the SAS Open Metadata Interface",
    author="OMI Demo Contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "rich>=13.5.0",
    ],
    extras_require={
        "com": [
            "pywin32>=306; sys_platform == 'win32'",
        ],
        "test": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "omi-demo=src.omi.client:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
