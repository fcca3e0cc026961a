from setuptools import setup, find_packages

setup(
    name="stack_deployer",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "boto3>=1.26.0",
        "aws-cdk-lib>=2.120.0",
        "constructs>=10.0.0",
    ],
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "stack-deployer=stack_deployer.cli:main",
        ],
    },
    description="A tool to deploy a packaged Lambda function behind an HTTP API as a CloudFormation stack",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
            "moto[cloudformation,s3]>=5.0.0",
        ],
    },
)
