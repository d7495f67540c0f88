import os

from setuptools import find_packages, setup

VERSION = '0.1.0'


def read_readme():
    try:
        with open(os.path.join(os.path.dirname(__file__), 'README.md')) as fh:
            return fh.read()
    except OSError:
        return ''


TEST_REQS = [
    'coverage>=4.2',
    'pycodestyle>=2.3.1',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'braceexpand>=0.1.2',
    'networkx>=2.0',
    'numpy>=1.13.1',
    'pandas>=1.0',
    'shortuuid>=0.5.0',
]

DEPLOY_REQS = ['twine', 'wheel']


setup(
    name='graphsv',
    version='{}'.format(VERSION),
    packages=find_packages(exclude=['tests', 'tests.*']),
    description='Read-depth structural variant calling over breakpoint graphs',
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS + DEPLOY_REQS,
        'deploy': DEPLOY_REQS,
    },
    tests_require=TEST_REQS,
    python_requires='>=3.6',
    test_suite='tests',
    entry_points={'console_scripts': ['graphsv = graphsv.main:main']},
)
