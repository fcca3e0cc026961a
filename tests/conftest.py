"""
Pytest configuration file for Stack Deployer tests.
"""
import pytest
from unittest.mock import patch

import boto3
import moto


@pytest.fixture
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    with patch.dict('os.environ', {
        'AWS_ACCESS_KEY_ID': 'testing',
        'AWS_SECRET_ACCESS_KEY': 'testing',
        'AWS_SECURITY_TOKEN': 'testing',
        'AWS_SESSION_TOKEN': 'testing',
        'AWS_DEFAULT_REGION': 'us-east-1',
    }):
        yield


@pytest.fixture
def s3_client(aws_credentials):
    """S3 client fixture."""
    with moto.mock_aws():
        yield boto3.client('s3', region_name='us-east-1')


@pytest.fixture
def cloudformation_client(aws_credentials):
    """CloudFormation client fixture."""
    with moto.mock_aws():
        yield boto3.client('cloudformation', region_name='us-east-1')


@pytest.fixture
def archive_path(tmp_path):
    """Packaged function archive on disk."""
    path = tmp_path / "lambda.zip"
    path.write_bytes(b"PK\x05\x06" + b"\x00" * 18)
    return str(path)


@pytest.fixture
def token_factory():
    """Deterministic token factory returning a new token on each call."""
    tokens = iter(["0a1b2c3d", "4e5f6a7b", "8c9d0e1f", "2a3b4c5d"])
    return lambda: next(tokens)
