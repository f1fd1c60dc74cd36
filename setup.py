import os

import setuptools

# Make sure that README.md decodes in environments that use the C locale
# (which implies ASCII), by explicitly giving the encoding.
with open(os.path.join(os.path.dirname(__file__), "README.md"), encoding="utf-8") as f:
    long_description = f.read()


setuptools.setup(
    name="bootwidgets",
    # MAJOR.MINOR.PATCH, per http://semver.org
    version="0.1.0",
    description="Text-mode widget toolkit for boot menus",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="bootwidgets contributors",
    keywords="boot, menu, tui, terminal, forms, widgets",
    license="ISC",
    py_modules=(
        "bootterm",
        "bootforms",
        "bootwidgets",
        "bootedit",
    ),
    entry_points={
        "console_scripts": ("bootedit = bootedit:main",)
    },
    # Note: no curses dependency. bootterm talks to the terminal directly.
    python_requires=">=3.6",
    extras_require={"test": ["pytest"]},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: User Interfaces",
        "Topic :: System :: Boot",
        "License :: OSI Approved :: ISC License (ISCL)",
        "Operating System :: POSIX",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
        "Programming Language :: Python :: Implementation :: PyPy",
    ],
)
