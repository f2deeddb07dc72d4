#!/usr/bin/env python

from setuptools import setup

import blindcred

setup(name='blindcred',
      version=blindcred.VERSION,
      description='A Coconut-style blind signature scheme for anonymous credentials over BN254 pairings',
      packages=['blindcred'],
      license="2-clause BSD",
      long_description="""An authority signs an attribute it never sees; the holder unblinds the signature and shows unlinkable rerandomized copies of it. Built on petlib and bplib.""",

      install_requires=[
            "petlib >= 0.0.45",
            "bplib >= 0.0.6",
            "msgpack >= 1.0.0",
      ],
      extras_require={
            "test": [
                  "pytest >= 2.5.0",
                  "pytest-cov >= 1.8.1",
                  "paver >= 1.2.3",
            ],
            "lint": [
                  "pylint",
                  "astroid",
            ],
      },
      zip_safe=False,
)
