#!/usr/bin/env python

from setup_init import *

setup(
    name="proxydetect",
    python_requires=">=3.9",
    extras_require={"test": ["pytest"]},
)
