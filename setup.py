#!/usr/bin/env python
# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""
Setuptools entrypoint

This file should not be run directly. To install, use:

    pip install .

To install with the test requirements, use:

    pip install '.[test]'

"""
import os

from setuptools import setup

# Get version and long description from niivox/info.py without importing
# the package
info = {}
with open(os.path.join('niivox', 'info.py')) as fobj:
    exec(fobj.read(), info)

setup(
    name='niivox',
    version=info['__version__'],
    description='Voxel level access to NIfTI-1 single file images',
    long_description=info['long_description'],
    license='MIT',
    packages=['niivox', 'niivox.testing', 'niivox.tests'],
    python_requires='>=3.9',
    install_requires=['numpy >=1.22'],
    extras_require={'test': ['pytest >=6']},
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering',
    ],
)
