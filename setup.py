"""Setup script for Zone Cleaner."""

from setuptools import setup, find_packages

setup(
    name="zone-cleaner",
    version="1.0.0",
    description="Tray tool that strips the Zone.Identifier stream from downloaded files",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    author="Zone Cleaner contributors",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "watchdog>=3.0.0",
        "pystray>=0.19.0",
        "Pillow>=10.0.0",
    ],
    extras_require={
        "windows": [
            "pywin32>=306",
        ],
        "gui": [
            "wxPython>=4.2",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "zone-cleaner=zone_clean.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Win32 (MS Windows)",
        "Intended Audience :: End Users/Desktop",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3",
        "Topic :: Utilities",
    ],
)
