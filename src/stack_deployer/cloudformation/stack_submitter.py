"""
CloudFormation stack submitter.
Handles creation requests for synthesized templates and optional status polling.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError, WaiterError

from stack_deployer.identifiers import is_valid_stack_name

logger = logging.getLogger(__name__)

CAPABILITY_IAM = "CAPABILITY_IAM"
CAPABILITY_NAMED_IAM = "CAPABILITY_NAMED_IAM"

# Properties that give an IAM resource a custom physical name
IAM_NAME_PROPERTIES = {
    "AWS::IAM::Role": "RoleName",
    "AWS::IAM::ManagedPolicy": "ManagedPolicyName",
    "AWS::IAM::User": "UserName",
    "AWS::IAM::Group": "GroupName",
    "AWS::IAM::InstanceProfile": "InstanceProfileName",
}


def required_capabilities(template: Dict[str, Any]) -> List[str]:
    """
    Determine the capabilities CloudFormation requires for a template.

    Args:
        template: CloudFormation template as a dictionary

    Returns:
        List with CAPABILITY_NAMED_IAM or CAPABILITY_IAM, or an empty list
        if the template declares no IAM resources
    """
    has_iam = False
    for resource in template.get("Resources", {}).values():
        resource_type = resource.get("Type", "")
        if not resource_type.startswith("AWS::IAM::"):
            continue
        has_iam = True
        name_property = IAM_NAME_PROPERTIES.get(resource_type)
        if name_property and name_property in resource.get("Properties", {}):
            return [CAPABILITY_NAMED_IAM]
    return [CAPABILITY_IAM] if has_iam else []


class StackSubmitter:
    """
    Submits CloudFormation templates as new stacks.

    Submission returns as soon as CloudFormation accepts the request.
    Waiting for the stack to converge is a separate, explicit call.
    """

    def __init__(self, region_name: Optional[str] = None):
        """
        Initialize the stack submitter.

        Args:
            region_name: AWS region name. If not provided, uses the default region.
        """
        self.cloudformation_client = boto3.client('cloudformation', region_name=region_name)

    def submit(
        self,
        stack_name: str,
        template: Dict[str, Any],
        capabilities: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        Request creation of a new stack.

        Args:
            stack_name: Name of the stack to create
            template: CloudFormation template as a dictionary
            capabilities: Capabilities to acknowledge (default: derived from the template)

        Returns:
            The create_stack response, containing the StackId

        Raises:
            ValueError: If the stack name is invalid
            ClientError: If CloudFormation rejects the request
        """
        if not is_valid_stack_name(stack_name):
            raise ValueError(f"Invalid stack name: {stack_name}")

        if capabilities is None:
            capabilities = required_capabilities(template)

        try:
            response = self.cloudformation_client.create_stack(
                StackName=stack_name,
                TemplateBody=json.dumps(template),
                Capabilities=capabilities
            )
        except ClientError as e:
            logger.error(f"Error creating stack {stack_name}: {e}")
            raise

        logger.info(f"Submitted stack {stack_name}: {response['StackId']}")
        return response

    def get_stack_status(self, stack_name: str) -> str:
        """
        Get the current status of a stack.

        Args:
            stack_name: Name or ID of the stack

        Returns:
            The stack status, e.g. CREATE_IN_PROGRESS
        """
        try:
            response = self.cloudformation_client.describe_stacks(StackName=stack_name)
        except ClientError as e:
            logger.error(f"Error describing stack {stack_name}: {e}")
            raise
        return response['Stacks'][0]['StackStatus']

    def wait_for_completion(self, stack_name: str, delay: int = 30, max_attempts: int = 120) -> str:
        """
        Wait for a submitted stack to finish creating.

        Args:
            stack_name: Name or ID of the stack
            delay: Seconds between status checks (default: 30)
            max_attempts: Maximum number of status checks (default: 120)

        Returns:
            The final stack status
        """
        logger.info(f"Waiting for stack {stack_name} to be created")
        waiter = self.cloudformation_client.get_waiter('stack_create_complete')
        try:
            waiter.wait(
                StackName=stack_name,
                WaiterConfig={'Delay': delay, 'MaxAttempts': max_attempts}
            )
        except WaiterError as e:
            status = self.get_stack_status(stack_name)
            logger.error(f"Stack {stack_name} did not reach CREATE_COMPLETE ({status}): {e}")
            return status

        status = self.get_stack_status(stack_name)
        logger.info(f"Stack {stack_name} reached {status}")
        return status
