"""
Main deployment module for Stack Deployer.

This module provides the orchestration that uploads a function archive, synthesizes
the stack template and submits it to CloudFormation.
"""
import logging
from typing import Any, Callable, Dict, Optional

from stack_deployer.cloudformation.stack_submitter import StackSubmitter
from stack_deployer.config import DeploymentConfig
from stack_deployer.identifiers import (
    TokenFactory,
    build_deployment_name,
    build_function_name,
    generate_token,
)
from stack_deployer.s3.artifact_uploader import ArtifactUploader
from stack_deployer.stack.single_deployment_stack import synthesize_template


class StackDeployer:
    """
    Main class for deploying a packaged Lambda function as a CloudFormation stack.

    This class runs the deployment steps in order:
    - Identifier generation
    - Function archive upload
    - Template synthesis
    - Stack submission (and, on request, waiting for completion)
    """

    def __init__(self, config: Optional[DeploymentConfig] = None, token_factory: TokenFactory = generate_token):
        """
        Initialize the Stack Deployer.

        Args:
            config: Deployment configuration. If not provided, uses the defaults.
            token_factory: Callable producing fresh identifier tokens.
        """
        self.config = config or DeploymentConfig()
        self.token_factory = token_factory
        self.uploader = ArtifactUploader(region_name=self.config.region)
        self.submitter = StackSubmitter(region_name=self.config.region)
        self.logger = logging.getLogger(__name__)

    def deploy(
        self,
        wait: bool = False,
        on_template: Optional[Callable[[Dict[str, Any]], None]] = None,
        on_submitted: Optional[Callable[[Dict[str, Any]], None]] = None
    ) -> Dict[str, Any]:
        """
        Deploy the configured function archive as a new stack.

        Args:
            wait: Wait for the stack to finish creating (default: False)
            on_template: Called with the template as soon as it is synthesized,
                before the stack is submitted
            on_submitted: Called with the create_stack response as soon as
                CloudFormation accepts it, before any waiting

        Returns:
            Dictionary containing deployment information (stack_name, stack_id,
            bucket, key, template, response and, when waiting, stack_status)

        Raises:
            ValueError: If the configured prefix does not produce a valid stack name
            FileNotFoundError: If the function archive does not exist
        """
        # Stack names must match [a-zA-Z][-a-zA-Z0-9]*
        deployment_name = build_deployment_name(self.config.deployment_prefix, self.token_factory)
        function_name = build_function_name(deployment_name, self.token_factory)
        self.logger.info(f"Starting deployment {deployment_name}")

        artifact = self.uploader.upload_function_archive(
            bucket=self.config.lambda_bucket,
            function_name=function_name,
            archive_path=self.config.archive_path
        )

        self.logger.info(f"Synthesizing template for {deployment_name}")
        template = synthesize_template(
            deployment_name=deployment_name,
            lambda_bucket_name=artifact.bucket,
            function_name=function_name
        )
        if on_template:
            on_template(template)

        response = self.submitter.submit(stack_name=deployment_name, template=template)
        if on_submitted:
            on_submitted(response)

        result = {
            "stack_name": deployment_name,
            "stack_id": response["StackId"],
            "bucket": artifact.bucket,
            "key": artifact.key,
            "template": template,
            "response": response,
        }

        if wait:
            result["stack_status"] = self.submitter.wait_for_completion(deployment_name)

        return result


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()]
    )
