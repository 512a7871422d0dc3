from setuptools import setup

setup(
    name="tktag",
    version="0.1.0",
    description="TK placeholder tags for Jinja and Markdown sources",
    license="MIT",
    packages=["tktag"],
    python_requires=">=3.8",
    install_requires=[
        "Jinja2>=3,<4",
        "MarkupSafe>=2",
        "PyYAML>=5.1",
        "mistletoe>=1.1,<2",
        "watchdog>=2",
    ],
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["tk = tktag.cli:main"]},
)
