#!/usr/bin/env python3
"""
Example script for deploying a packaged Lambda function behind an HTTP API.
"""
import argparse
import json
import logging
import sys

from stack_deployer.config import DeploymentConfig
from stack_deployer.main import StackDeployer, setup_logging


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Example script for deploying a Lambda function archive as a CloudFormation stack"
    )

    parser.add_argument(
        "--archive-path", 
        required=True, 
        help="Path of the packaged function archive"
    )
    parser.add_argument(
        "--bucket", 
        required=True, 
        help="S3 bucket to upload the archive to"
    )
    parser.add_argument(
        "--region", 
        default="eu-central-1", 
        help="AWS region to deploy to (default: eu-central-1)"
    )

    # General options
    parser.add_argument(
        "--verbose", 
        "-v", 
        action="store_true", 
        help="Enable verbose logging"
    )

    return parser.parse_args()


def main() -> int:
    """Main entry point for the example script."""
    args = parse_args()
    setup_logging(args.verbose)

    logger = logging.getLogger(__name__)
    logger.info("Starting example deployment")

    try:
        config = DeploymentConfig(
            region=args.region,
            lambda_bucket=args.bucket,
            archive_path=args.archive_path
        )
        deployer = StackDeployer(config=config)

        # Wait so the example reports the final stack status
        result = deployer.deploy(wait=True)

        print(json.dumps(result['template'], indent=2))
        logger.info(f"Stack {result['stack_name']} finished with status {result['stack_status']}")

        return 0 if result['stack_status'] == 'CREATE_COMPLETE' else 1

    except Exception as e:
        logger.error(f"Deployment failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
