"""
Artifact uploader for Lambda function archives.
Handles uploading packaged function code to S3.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactReference:
    """Location of an uploaded archive in S3."""

    bucket: str
    key: str


def archive_key(function_name: str) -> str:
    """Return the S3 key of the archive for a function."""
    return f"{function_name}.zip"


class ArtifactUploader:
    """
    Uploads packaged Lambda function archives to S3.

    Uploads are a single PutObject call. A failed upload is not retried and
    nothing is cleaned up.
    """

    def __init__(self, region_name: Optional[str] = None):
        """
        Initialize the artifact uploader.

        Args:
            region_name: AWS region name. If not provided, uses the default region.
        """
        self.s3_client = boto3.client('s3', region_name=region_name)

    def upload(self, bucket: str, key: str, archive_path: str) -> ArtifactReference:
        """
        Upload a local archive to S3.

        Args:
            bucket: Name of the destination S3 bucket
            key: Destination object key
            archive_path: Path of the local archive to upload

        Returns:
            Reference to the uploaded object

        Raises:
            FileNotFoundError: If the archive does not exist
            ClientError: If S3 rejects the upload
        """
        if not os.path.isfile(archive_path):
            raise FileNotFoundError(f"Function archive not found at {archive_path}")

        logger.info(f"Uploading {archive_path} to s3://{bucket}/{key}")
        try:
            with open(archive_path, 'rb') as body:
                self.s3_client.put_object(Bucket=bucket, Key=key, Body=body)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading {archive_path} to s3://{bucket}/{key}: {e}")
            raise

        logger.info(f"Uploaded function archive to s3://{bucket}/{key}")
        return ArtifactReference(bucket=bucket, key=key)

    def upload_function_archive(self, bucket: str, function_name: str, archive_path: str) -> ArtifactReference:
        """
        Upload the archive of a function under <function_name>.zip.

        Args:
            bucket: Name of the destination S3 bucket
            function_name: Name of the function the archive belongs to
            archive_path: Path of the local archive to upload

        Returns:
            Reference to the uploaded object
        """
        return self.upload(bucket, archive_key(function_name), archive_path)
