#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
#
# PNR signer: off-chain authorizations for the DreamPlay PNR contract
#

# To use this command to install and yet be able to edit the code (here). Great for dev:
#
#   pip install --editable .
#
# with cli + http server dependencies
#
#   pip install --editable '.[cli,server]'
#
# with test dependencies
#
#   pip install --editable '.[test]'
#
#
import re
from setuptools import setup

# can't import the package here: its dependencies aren't installed yet
with open("pnrsign/__init__.py", "r") as fh:
    __version__ = re.search(r"^__version__ = '([^']+)'", fh.read(), re.M).group(1)

# these minimum versions are tested, some earlier values would probably work too.
requirements = [
    'coincurve>=18.0.0',
    'eth-utils>=2.0.0,<4',
    'eth-hash[pycryptodome]>=0.5.0',
    'python-dotenv>=1.0.0',
]

server_requirements = [
    'flask>=2.2.0',
]

cli_requirements = [
    'click>=8.0.3',
    'requests>=2.26.0',
] + server_requirements

test_requirements = [
    'pytest',
    'click>=8.0.3',
    'requests>=2.26.0',
] + server_requirements

# only for developers playing with crypto libraries - cross library comparisons
test_plus_requirements = [
    'eth-account>=0.9.0',
] + test_requirements

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name='pnr-signer',
    version=__version__,
    packages=[ 'pnrsign' ],
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={
        'cli': cli_requirements,
        'server': server_requirements,
        'test': test_requirements,
        'test_plus': test_plus_requirements,
    },
    description="Sign time-boxed proof-of-play authorizations for an on-chain verifier",
    long_description=long_description,
    long_description_content_type="text/markdown",
    entry_points='''
        [console_scripts]
        pnrsign=pnrsign.cli:main
    ''',
    classifiers=[
        'Operating System :: POSIX :: Linux',
        'Operating System :: Microsoft :: Windows',
        'Operating System :: MacOS :: MacOS X',
    ],
)
