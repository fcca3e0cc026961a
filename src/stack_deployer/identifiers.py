"""
Identifier generation for deployments.
Produces the random tokens that namespace stack names and function archives.
"""
import re
import secrets
from typing import Callable

TOKEN_BYTES = 4

# CloudFormation stack names must match [a-zA-Z][-a-zA-Z0-9]*
STACK_NAME_PATTERN = re.compile(r"^[a-zA-Z][-a-zA-Z0-9]*$")
STACK_NAME_MAX_LENGTH = 128

TokenFactory = Callable[[], str]


def generate_token() -> str:
    """
    Generate a short random token.

    Returns:
        Lowercase hexadecimal string of 2 * TOKEN_BYTES characters
    """
    return secrets.token_hex(TOKEN_BYTES)


def is_valid_stack_name(name: str) -> bool:
    """Check a name against the CloudFormation stack naming rules."""
    return bool(name) and len(name) <= STACK_NAME_MAX_LENGTH and STACK_NAME_PATTERN.match(name) is not None


def build_deployment_name(prefix: str, token_factory: TokenFactory = generate_token) -> str:
    """
    Build a fresh deployment name from a prefix and a new token.

    Args:
        prefix: Human readable prefix, must start with a letter
        token_factory: Callable returning a new token on each call

    Returns:
        Deployment name in the form <prefix>-<token>

    Raises:
        ValueError: If the resulting name is not a valid stack name
    """
    deployment_name = f"{prefix}-{token_factory()}"
    if not is_valid_stack_name(deployment_name):
        raise ValueError(f"Invalid deployment name: {deployment_name}")
    return deployment_name


def build_function_name(deployment_name: str, token_factory: TokenFactory = generate_token) -> str:
    """
    Build the name of the function archive for a deployment.

    Args:
        deployment_name: Name of the deployment the function belongs to
        token_factory: Callable returning a new token on each call

    Returns:
        Function name in the form <deployment_name>_<token>
    """
    if not deployment_name:
        raise ValueError("Deployment name is required")
    return f"{deployment_name}_{token_factory()}"
