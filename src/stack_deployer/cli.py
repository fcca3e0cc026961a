#!/usr/bin/env python3
"""
Command-line interface for the Stack Deployer system.
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from stack_deployer.cloudformation.stack_submitter import StackSubmitter
from stack_deployer.config import DeploymentConfig
from stack_deployer.identifiers import build_deployment_name, build_function_name
from stack_deployer.main import StackDeployer, setup_logging
from stack_deployer.stack.single_deployment_stack import synthesize_template


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--region",
        help="AWS region to use (default: eu-central-1)"
    )
    parser.add_argument(
        "--bucket",
        help="S3 bucket holding function archives (default: cdk-test-tfn-lambdas)"
    )
    parser.add_argument(
        "--prefix",
        help="Prefix of the generated stack name (default: tfn)"
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Deploy a packaged Lambda function behind an HTTP API as a CloudFormation stack"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Deploy command
    deploy_parser = subparsers.add_parser("deploy", help="Upload the function archive and create the stack")
    _add_config_arguments(deploy_parser)
    deploy_parser.add_argument(
        "--archive-path",
        help="Path of the packaged function archive (default: lambda.zip)"
    )
    deploy_parser.add_argument(
        "--wait",
        action="store_true",
        help="Wait for the stack to finish creating"
    )

    # Synth command
    synth_parser = subparsers.add_parser("synth", help="Print the stack template without deploying")
    _add_config_arguments(synth_parser)
    synth_parser.add_argument(
        "--deployment-name",
        help="Deployment name to synthesize for (default: generated from the prefix)"
    )
    synth_parser.add_argument(
        "--function-name",
        help="Name of the uploaded function (default: generated from the deployment name)"
    )

    # Status command
    status_parser = subparsers.add_parser("status", help="Show the status of a deployed stack")
    status_parser.add_argument(
        "--stack-name",
        required=True,
        help="Name of the stack"
    )
    status_parser.add_argument(
        "--region",
        help="AWS region to use (default: eu-central-1)"
    )

    # General options
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser.parse_args(args)


def build_config(args: argparse.Namespace) -> DeploymentConfig:
    """Build the deployment configuration from parsed arguments."""
    return DeploymentConfig().with_overrides(
        region=getattr(args, "region", None),
        lambda_bucket=getattr(args, "bucket", None),
        archive_path=getattr(args, "archive_path", None),
        deployment_prefix=getattr(args, "prefix", None),
    )


def print_template(template: dict) -> None:
    """Write the synthesized template to stdout."""
    print(f"template: {json.dumps(template, indent=2)}", flush=True)


def print_response(response: dict) -> None:
    """Write the create_stack acknowledgement to stdout."""
    print(json.dumps(response, indent=2, default=str), flush=True)


def deploy_command(args: argparse.Namespace) -> int:
    """Handle the deploy command."""
    logger = logging.getLogger("stack_deployer.cli")

    deployer = StackDeployer(config=build_config(args))
    result = deployer.deploy(
        wait=args.wait,
        on_template=print_template,
        on_submitted=print_response
    )

    logger.info(f"Submitted stack {result['stack_name']}: {result['stack_id']}")
    if args.wait:
        logger.info(f"Stack {result['stack_name']} finished with status {result['stack_status']}")
        return 0 if result['stack_status'] == 'CREATE_COMPLETE' else 1
    return 0


def synth_command(args: argparse.Namespace) -> int:
    """Handle the synth command."""
    config = build_config(args)
    deployment_name = args.deployment_name or build_deployment_name(config.deployment_prefix)
    function_name = args.function_name or build_function_name(deployment_name)

    template = synthesize_template(
        deployment_name=deployment_name,
        lambda_bucket_name=config.lambda_bucket,
        function_name=function_name
    )
    print(json.dumps(template, indent=2))
    return 0


def status_command(args: argparse.Namespace) -> int:
    """Handle the status command."""
    config = build_config(args)
    submitter = StackSubmitter(region_name=config.region)
    print(submitter.get_stack_status(args.stack_name))
    return 0


COMMANDS = {
    "deploy": deploy_command,
    "synth": synth_command,
    "status": status_command,
}


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parsed_args = parse_args(args)
    setup_logging(parsed_args.verbose)

    command = COMMANDS.get(parsed_args.command)
    if command is None:
        print("No command specified. Use --help for usage information.")
        return 1

    logger = logging.getLogger("stack_deployer.cli")
    try:
        return command(parsed_args)
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 1
    except Exception as e:
        logger.error(f"{parsed_args.command.capitalize()} failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
