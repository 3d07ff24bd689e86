#!/usr/bin/env python3

from setuptools import setup

setup(
    name="id3tag",
    version="0.1.0",
    packages=["id3tag"],
    python_requires=">=3.7",
    license="BSD",
    description="ID3v2 tag frame/field codec in pure Python 3",
    long_description="""
id3tag reads and writes ID3v2 metadata blocks: it decodes ID3v2.2,
v2.3 and v2.4 tags into an ordered list of frames with typed fields,
lets callers edit them, and renders them back as ID3v2.4 with optional
unsynchronisation, compression, CRC and footer. Audio data is never
touched.
""",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Topic :: Multimedia :: Sound/Audio"
        ],
    )
