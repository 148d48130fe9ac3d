# I'd have preferred a setup.cfg, but `pip -e` rejects it.

import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="polyrep",
    version="0.0.1",
    description="Lazy algebra of H- and V-representations of polyhedra",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    packages=["polyrep", "polyrep.backend"],
    install_requires=[
        "numpy",
        "scipy>=1.10",  # scipy.spatial.QhullError
    ],
    extras_require={
        "with_tests": ["ddt"],
    },
    python_requires=">=3.8",
)
