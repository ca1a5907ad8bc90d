#!/usr/bin/env python

from setuptools import setup

with open('README.md') as readme_file:
    readme = readme_file.read()

with open('sqlitehdr/VERSION') as f:
    version = f.read().lstrip().rstrip()

setup(
    name='sqlitehdr',
    version=version,
    author='Netherlands Forensic Institute',
    description="SQLite3 database header decoder",
    long_description=readme+"\n\n",
    long_description_content_type='text/markdown',
    packages=['sqlitehdr'],
    classifiers=[
        'License :: OSI Approved :: MIT License',
        'Development Status :: 5 - Production/Stable',
        'Programming Language :: Python :: 3 :: Only',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Information Analysis',
        'Environment :: Console'
        ],
    keywords='forensic database sqlite header',
    entry_points={
        'console_scripts': ['sqlitehdr=sqlitehdr._cmdline:main'],
        },
    install_requires=[
        'bitstring>=3.1.3,<5',
    ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.6',
    zip_safe=False,
    package_data={
        # include the VERSION file
        'sqlitehdr': ['VERSION'],
    }
)
