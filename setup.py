from setuptools import setup
about = {}
with open("iphoneorganizer/__version__.py") as f:
    exec(f.read(), about)


setup(
    name="iphoneorganizer",
    version=about["__version__"],
    description="Copy a phone photo backup into a YYYY/MM folder tree and keep it lean.",
    author="gabbro246",
    packages=["iphoneorganizer"],
    install_requires=[
        "colorama",
    ],
    extras_require={
        "test": [
            "pytest",
        ]
    },
    entry_points={
        "console_scripts": [
            "iphoneorganizer=iphoneorganizer.cli:main",
        ]
    },
    include_package_data=True,
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
