from setuptools import setup, find_packages


setup(
    name="soledit",
    version="0.1",
    packages=find_packages(include=["soledit", "soledit.*"]),
    description="Reader, writer and editor for Flash shared-object (.sol) files.",
    python_requires=">=3.9",
    install_requires=[
        "Py3AMF>=0.8",
    ],
    entry_points={
        "console_scripts": [
            "soledit=soledit.cli:main",
            "soldump=soledit.cli:soldump_main",
        ]
    },
)
