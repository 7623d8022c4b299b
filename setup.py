from setuptools import setup, find_packages
import os

install_requires = [
    "pyrsistent>=0.19",
]

# Read long description from README.md if available
long_description = ""
long_description_ct = "text/markdown"
readme_path = os.path.join(os.path.dirname(__file__), "README.md")
if os.path.exists(readme_path):
    with open(readme_path, "r", encoding="utf-8") as fh:
        long_description = fh.read()

setup(
    name="lpair",
    version="0.1.0",
    description="Reader for dotted-pair S-expressions into an immutable syntax tree",
    long_description=long_description,
    long_description_content_type=long_description_ct,
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require={
        "tests": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "lpair=lpair.lrepl:main",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Interpreters",
    ],
)
