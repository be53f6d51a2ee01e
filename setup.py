import os
import re
from setuptools import find_packages, setup


def _read_version():
    init_file = os.path.join(
        os.path.dirname(os.path.realpath(__file__)), "src", "seqalign", "__init__.py"
    )
    with open(init_file, "r") as f:
        match = re.search(r'^__version__ = "(.+)"$', f.read(), re.MULTILINE)
    if match is None:
        raise RuntimeError("Cannot find the version number")
    return match.group(1)


with open("README.rst", "r") as f:
    long_description = f.read()


setup(
    name="seqalign",
    version=_read_version(),
    description="Pairwise and multiple sequence alignment with suffix tree based "
    "exact and approximate matching",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    license="BSD-3-Clause",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
    ],
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"seqalign.sequence.align": ["matrix_data/*.mat"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=["numpy >= 1.25"],
    extras_require={
        "test": ["pytest", "pytest-codspeed"],
    },
    zip_safe=False,
)
