from setuptools import setup

with open("requirements.txt", "r") as f:
    requirements = [line for line in f.read().splitlines() if line.strip() and not line.startswith("#")]

with open("script_blocks/version.py", "r") as f:
    exec(f.read(), globals())

setup(
    name = "script_blocks",
    description = "an incremental block script and cell interpreter for Python",
    version = __version__,
    packages = [
        "script_blocks",
        "script_blocks.ast",
        "script_blocks.parse",
        "script_blocks.passes",
        "script_blocks.pretty",
        "script_blocks.cli",
    ],
    entry_points = {
        "console_scripts": [
            "sb-run=script_blocks.cli.run:main",
            "sb-split=script_blocks.cli.split:main",
            "sb-meta=script_blocks.cli.meta:main",
            "sb-repl=script_blocks.cli.repl:main",
        ]
    },
    package_data = {
        "script_blocks": ["py.typed"]
    },
    python_requires = ">=3.10",
    install_requires = requirements,
    extras_require = {
        "test": ["pytest"],
    },
)
