"""
CDK stack for a single Lambda deployment fronted by an HTTP API.

The stack references a function archive that was uploaded to S3 ahead of time,
so synthesis needs no assets and no CDK bootstrap stack in the target account.
"""
import logging
import tempfile
from typing import Any, Dict

from aws_cdk import App, BootstraplessSynthesizer, RemovalPolicy, Stack
from aws_cdk import aws_apigatewayv2 as apigwv2
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_logs as logs
from aws_cdk import aws_s3 as s3
from aws_cdk.aws_apigatewayv2_integrations import HttpLambdaIntegration
from constructs import Construct

from stack_deployer.s3.artifact_uploader import archive_key

logger = logging.getLogger(__name__)

# Construct id of the function. The physical name in AWS gets prefixed with
# the deployment name by CloudFormation.
INTERNAL_FUNCTION_NAME = "helloWorld"

LAMBDA_HANDLER = "index.handler"
LAMBDA_RUNTIME = lambda_.Runtime.NODEJS_20_X
LOG_RETENTION = logs.RetentionDays.FIVE_DAYS
LOG_WRITE_ACTIONS = ["logs:PutLogEvents", "logs:CreateLogStream"]
LAMBDA_LOG_GROUPS_ARN = "arn:aws:logs:*:*:log-group:/aws/lambda/*"
PROXY_ROUTE_PATH = "/{proxy+}"


class SingleDeploymentStack(Stack):
    """
    Stack with one Lambda function behind a catch-all HTTP API route.

    Resources:
    - IAM execution role assumed by Lambda, allowed to write to its log groups
    - Lambda function loaded from an existing S3 archive
    - Log group for the function with a short retention
    - HTTP API proxying every path and method to the function
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        deployment_name: str,
        lambda_bucket_name: str,
        function_name: str,
        **kwargs,
    ) -> None:
        """
        Initialize the SingleDeploymentStack.

        Args:
            scope: CDK app or stage scope.
            construct_id: Unique identifier for this stack.
            deployment_name: Name of the deployment, used for the HTTP API.
            lambda_bucket_name: Name of the S3 bucket holding the function archive.
            function_name: Name of the uploaded function, the archive key is <function_name>.zip.
            **kwargs: Additional stack properties (synthesizer, env, etc.).

        Raises:
            ValueError: If any of the names is empty.
        """
        if not deployment_name or not deployment_name.strip():
            raise ValueError("deployment_name cannot be empty")
        if not lambda_bucket_name or not lambda_bucket_name.strip():
            raise ValueError("lambda_bucket_name cannot be empty")
        if not function_name or not function_name.strip():
            raise ValueError("function_name cannot be empty")

        super().__init__(scope, construct_id, **kwargs)

        # External bucket where the function code is stored
        lambda_bucket = s3.Bucket.from_bucket_arn(
            self,
            "lambda-storage",
            f"arn:aws:s3:::{lambda_bucket_name}",
        )
        function_code = lambda_.Code.from_bucket(lambda_bucket, archive_key(function_name))

        self.role = iam.Role(
            self,
            "Role",
            assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
            description=f"Execution role for {deployment_name}",
        )

        self.function = lambda_.Function(
            self,
            INTERNAL_FUNCTION_NAME,
            runtime=LAMBDA_RUNTIME,
            handler=LAMBDA_HANDLER,
            code=function_code,
            role=self.role,
        )

        # Retention set on the function itself is not applied to the implicit
        # log group, so the log group is declared explicitly.
        self.log_group = logs.LogGroup(
            self,
            f"logGroup{INTERNAL_FUNCTION_NAME}",
            log_group_name=f"/aws/lambda/{self.function.function_name}",
            retention=LOG_RETENTION,
            removal_policy=RemovalPolicy.DESTROY,
        )

        self.role.add_to_policy(
            iam.PolicyStatement(
                actions=LOG_WRITE_ACTIONS,
                resources=[LAMBDA_LOG_GROUPS_ARN],
            )
        )

        self.http_api = apigwv2.HttpApi(self, deployment_name)
        lambda_integration = HttpLambdaIntegration(
            "lambda",
            self.function,
            payload_format_version=apigwv2.PayloadFormatVersion.VERSION_2_0,
        )
        self.http_api.add_routes(
            path=PROXY_ROUTE_PATH,
            methods=[apigwv2.HttpMethod.ANY],
            integration=lambda_integration,
        )


def synthesize_template(deployment_name: str, lambda_bucket_name: str, function_name: str) -> Dict[str, Any]:
    """
    Synthesize the CloudFormation template of a single deployment.

    No network calls are made; the cloud assembly is written to a temporary
    directory that is removed afterwards.

    Args:
        deployment_name: Name of the deployment, also used as the stack id
        lambda_bucket_name: Name of the S3 bucket holding the function archive
        function_name: Name of the uploaded function

    Returns:
        CloudFormation template as a dictionary
    """
    with tempfile.TemporaryDirectory() as outdir:
        app = App(outdir=outdir)
        stack = SingleDeploymentStack(
            app,
            deployment_name,
            deployment_name=deployment_name,
            lambda_bucket_name=lambda_bucket_name,
            function_name=function_name,
            synthesizer=BootstraplessSynthesizer(),
            analytics_reporting=False,
        )
        assembly = app.synth()
        template = assembly.get_stack_artifact(stack.artifact_id).template

    logger.debug(f"Synthesized template for {deployment_name} with {len(template.get('Resources', {}))} resources")
    return template
