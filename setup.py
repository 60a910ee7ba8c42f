from setuptools import setup, find_packages

setup(
    name='aoctl',
    version='0.1.0',
    packages=find_packages(exclude=['aoctl.tests']),
    include_package_data=True,
    install_requires=[
        'typer[all]',
        'rich',
        'requests',
        'pydantic>=2',
        'pyyaml',
        'python-dotenv',
    ],
    extras_require={
        'test': [
            'pytest',
            'jsonschema',
        ],
    },
    entry_points={
        'console_scripts': [
            'aoctl=aoctl.cli:app'
        ]
    },
    author='Your Name',
    description='CLI for deploying and redeploying AuroraConfig applications across clusters',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
