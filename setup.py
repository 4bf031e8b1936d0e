import setuptools

setuptools.setup(
    name="osml-cdk-constructs",
    version="2.1.0",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "osml_cdk_constructs": ["config/*/*.yml", "tile_server/sweeper/*.py"],
    },
    include_package_data=True,
    install_requires=[
        "aws-cdk-lib>=2.188.0",
        "constructs>=10.4.2",
        "boto3>=1.38.0",
        "python-dotenv>=1.0.0",
        "yamldataclassconfig>=1.5.0"
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "hypothesis>=6.100.0"
        ]
    },
)
