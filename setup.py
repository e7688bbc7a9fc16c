# setup.py
from setuptools import setup, find_packages

setup(
    name='vscroll',
    version='0.1.0',
    author='Ahmad Muhammad Bashir (RED X)',
    author_email='ambashir02@gmail.com',
    description='Virtual scroll core: windowed-range calculators for virtualized lists and grids.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',

    # Picks up `vscroll` and `vscroll_cli`.
    packages=find_packages(exclude=['tests', 'tests.*']),

    install_requires=[
        'typer',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },

    # Creates an executable script named `vscroll` that calls the `app`
    # object inside `vscroll_cli.main`.
    entry_points={
        'console_scripts': [
            'vscroll = vscroll_cli.main:app',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: User Interfaces',
    ],
    python_requires='>=3.10',
)
