#!/usr/bin/env python3

from setuptools import setup, find_packages
import os

from contractgraph.__version__ import __version__

here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, "README.md")) as fd:
    README = fd.read()

# see requirements.txt for explanations
install_requires = [
    "python-bitcoinlib>=0.11.0",
    "click>=7.0",
    "graphviz>=0.8",
]

setup(name="python-contractgraph",
      version=__version__,
      description="Transaction graph and timelock reachability analysis for pre-signed bitcoin contracts.",
      long_description=README,
      long_description_content_type="text/markdown",
      classifiers=[
        "Programming Language :: Python",
      ],
      keywords="bitcoin",
      packages=find_packages(),
      zip_safe=False,
      include_package_data=True,
      install_requires=install_requires,
      test_suite="contractgraph.tests",
      entry_points="""
        [console_scripts]
        contractgraph=contractgraph.cli:cli
      """,
)
