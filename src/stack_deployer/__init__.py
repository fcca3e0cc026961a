"""
Stack Deployer - A system for deploying a packaged Lambda function as a CloudFormation stack.

This package uploads a function archive to S3, synthesizes a CDK stack with the function
fronted by an HTTP API, and submits the resulting template to CloudFormation.
"""

__version__ = "0.1.0"
