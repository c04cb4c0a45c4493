from setuptools import setup, find_packages

setup(
    name="backupbuddy",
    version="0.1.0",
    description="BackupBuddy mirrors your important files into a timestamped folder, archives it and encrypts the archive for a GPG recipient.",
    author="Dominik Püllen",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "backupbuddy=backupbuddy.main:main",
        ],
    },
    python_requires=">=3.9",
)
