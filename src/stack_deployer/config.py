"""
Deployment configuration for Stack Deployer.
"""
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_REGION = "eu-central-1"
DEFAULT_LAMBDA_BUCKET = "cdk-test-tfn-lambdas"
DEFAULT_ARCHIVE_PATH = "lambda.zip"
DEFAULT_DEPLOYMENT_PREFIX = "tfn"


@dataclass(frozen=True)
class DeploymentConfig:
    """
    Settings for a single deployment run.

    Attributes:
        region: AWS region used for both S3 and CloudFormation
        lambda_bucket: Name of the S3 bucket that stores function archives
        archive_path: Local path of the packaged function archive
        deployment_prefix: Human readable prefix of the stack name
    """

    region: str = DEFAULT_REGION
    lambda_bucket: str = DEFAULT_LAMBDA_BUCKET
    archive_path: str = DEFAULT_ARCHIVE_PATH
    deployment_prefix: str = DEFAULT_DEPLOYMENT_PREFIX

    def with_overrides(
        self,
        region: Optional[str] = None,
        lambda_bucket: Optional[str] = None,
        archive_path: Optional[str] = None,
        deployment_prefix: Optional[str] = None,
    ) -> "DeploymentConfig":
        """Return a copy with every non-empty override applied."""
        overrides = {
            "region": region,
            "lambda_bucket": lambda_bucket,
            "archive_path": archive_path,
            "deployment_prefix": deployment_prefix,
        }
        return replace(self, **{k: v for k, v in overrides.items() if v})
