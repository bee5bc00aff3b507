from setuptools import find_packages, setup

setup(
    name="azdo-git-resources",
    version="0.1.0",
    license="Apache License 2.0",

    python_requires=">=3.12",
    description="Declaratively manage Azure DevOps git repository branches "
                "and files.",

    packages=find_packages(exclude=('tests', 'tests.*')),

    install_requires=[
        "azure-devops>=7.1.0b4",
        "Click>=8.1,<9.0",
        "msrest>=0.7.1",
        "pydantic>=2.7,<3.0",
        "pydantic-settings>=2.3,<3.0",
        "structlog>=24.1",
        "stamina>=24.2",
        "prometheus-client>=0.20",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-mock>=3.14",
        ],
    },

    test_suite="tests",

    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.12',
    ],
    entry_points={
        'console_scripts': [
            'azdo-git = azdo_git.cli:root',
        ],
    },
)
