#!/usr/bin/env python
from setuptools import setup
setup(
    name='chainbatch',
    version='1.0',
    description='Dependency-aware HTTP Request Batching',
    author='Six Apart',
    author_email='python@sixapart.com',

    packages=['chainbatch'],
    python_requires='>=3.9',
    install_requires=[
        'httplib2>=0.19.0',
        'jsonpath-ng>=1.5.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
