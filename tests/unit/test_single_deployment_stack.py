"""
CDK assertion tests for the single deployment stack.
"""
import pytest
from aws_cdk import App, BootstraplessSynthesizer
from aws_cdk.assertions import Match, Template

from stack_deployer.stack.single_deployment_stack import SingleDeploymentStack, synthesize_template

DEPLOYMENT_NAME = "tfn-0a1b2c3d"
BUCKET_NAME = "test-bucket"
FUNCTION_NAME = "tfn-0a1b2c3d_4e5f6a7b"


def _logical_id(template, resource_type):
    resources = template.find_resources(resource_type)
    assert len(resources) == 1
    return next(iter(resources))


class TestSingleDeploymentStack:
    """Tests for the SingleDeploymentStack CDK stack."""

    @pytest.fixture
    def template(self):
        """Create a template from SingleDeploymentStack."""
        app = App()
        stack = SingleDeploymentStack(
            app,
            DEPLOYMENT_NAME,
            deployment_name=DEPLOYMENT_NAME,
            lambda_bucket_name=BUCKET_NAME,
            function_name=FUNCTION_NAME,
            synthesizer=BootstraplessSynthesizer(),
        )
        return Template.from_stack(stack)

    def test_resource_counts(self, template):
        """Test that each declared resource appears once."""
        template.resource_count_is("AWS::Lambda::Function", 1)
        template.resource_count_is("AWS::IAM::Role", 1)
        template.resource_count_is("AWS::IAM::Policy", 1)
        template.resource_count_is("AWS::Logs::LogGroup", 1)
        template.resource_count_is("AWS::ApiGatewayV2::Api", 1)
        template.resource_count_is("AWS::ApiGatewayV2::Route", 1)
        template.resource_count_is("AWS::ApiGatewayV2::Integration", 1)

    def test_function_code_references_archive(self, template):
        """Test that the function loads code from the exact bucket and key."""
        template.has_resource_properties(
            "AWS::Lambda::Function",
            {
                "Code": {
                    "S3Bucket": BUCKET_NAME,
                    "S3Key": f"{FUNCTION_NAME}.zip",
                },
                "Handler": "index.handler",
                "Runtime": "nodejs20.x",
            },
        )

    def test_function_uses_execution_role(self, template):
        """Test that the function is bound to the declared role."""
        role_id = _logical_id(template, "AWS::IAM::Role")
        template.has_resource_properties(
            "AWS::Lambda::Function",
            {"Role": {"Fn::GetAtt": [role_id, "Arn"]}},
        )

    def test_role_trusted_by_lambda_without_managed_policies(self, template):
        """Test that the role is assumable by Lambda and starts without permissions."""
        template.has_resource_properties(
            "AWS::IAM::Role",
            {
                "AssumeRolePolicyDocument": {
                    "Statement": [
                        Match.object_like(
                            {
                                "Action": "sts:AssumeRole",
                                "Effect": "Allow",
                                "Principal": {"Service": "lambda.amazonaws.com"},
                            }
                        )
                    ]
                },
                "ManagedPolicyArns": Match.absent(),
            },
        )

    def test_role_policy_allows_log_writes(self, template):
        """Test that the role may write to all Lambda log groups."""
        role_id = _logical_id(template, "AWS::IAM::Role")
        template.has_resource_properties(
            "AWS::IAM::Policy",
            {
                "PolicyDocument": {
                    "Statement": Match.array_with(
                        [
                            {
                                "Action": ["logs:PutLogEvents", "logs:CreateLogStream"],
                                "Effect": "Allow",
                                "Resource": "arn:aws:logs:*:*:log-group:/aws/lambda/*",
                            }
                        ]
                    )
                },
                "Roles": [{"Ref": role_id}],
            },
        )

    def test_log_group_named_after_function(self, template):
        """Test that the log group name is /aws/lambda/<function name>."""
        function_id = _logical_id(template, "AWS::Lambda::Function")
        template.has_resource_properties(
            "AWS::Logs::LogGroup",
            {
                "LogGroupName": {
                    "Fn::Join": ["", ["/aws/lambda/", {"Ref": function_id}]]
                },
                "RetentionInDays": 5,
            },
        )

    def test_log_group_deleted_with_stack(self, template):
        """Test that the log group is removed when the stack is deleted."""
        template.has_resource(
            "AWS::Logs::LogGroup",
            {"DeletionPolicy": "Delete", "UpdateReplacePolicy": "Delete"},
        )

    def test_http_api_named_after_deployment(self, template):
        """Test that the HTTP API carries the deployment name."""
        template.has_resource_properties(
            "AWS::ApiGatewayV2::Api",
            {"Name": DEPLOYMENT_NAME, "ProtocolType": "HTTP"},
        )

    def test_catch_all_route(self, template):
        """Test that a single route proxies every path and method."""
        template.has_resource_properties(
            "AWS::ApiGatewayV2::Route",
            {"RouteKey": "ANY /{proxy+}"},
        )

    def test_integration_uses_payload_format_v2(self, template):
        """Test that the route integrates directly with the function."""
        template.has_resource_properties(
            "AWS::ApiGatewayV2::Integration",
            {"IntegrationType": "AWS_PROXY", "PayloadFormatVersion": "2.0"},
        )

    def test_api_may_invoke_function(self, template):
        """Test that API Gateway is allowed to invoke the function."""
        template.has_resource_properties(
            "AWS::Lambda::Permission",
            {
                "Action": "lambda:InvokeFunction",
                "Principal": "apigateway.amazonaws.com",
            },
        )

    @pytest.mark.parametrize("field", ["deployment_name", "lambda_bucket_name", "function_name"])
    def test_empty_inputs_raise_error(self, field):
        """Test that empty names raise ValueError."""
        props = {
            "deployment_name": DEPLOYMENT_NAME,
            "lambda_bucket_name": BUCKET_NAME,
            "function_name": FUNCTION_NAME,
        }
        props[field] = "  "

        with pytest.raises(ValueError, match=f"{field} cannot be empty"):
            SingleDeploymentStack(App(), "TestStack", **props)


class TestSynthesizeTemplate:
    """Tests for template synthesis."""

    def test_returns_resources(self):
        """Test that synthesis returns a template dictionary."""
        template = synthesize_template(DEPLOYMENT_NAME, BUCKET_NAME, FUNCTION_NAME)

        types = {resource["Type"] for resource in template["Resources"].values()}
        assert "AWS::Lambda::Function" in types
        assert "AWS::ApiGatewayV2::Api" in types

    def test_needs_no_bootstrap(self):
        """Test that the template does not depend on a CDK bootstrap stack."""
        template = synthesize_template(DEPLOYMENT_NAME, BUCKET_NAME, FUNCTION_NAME)

        assert "BootstrapVersion" not in template.get("Parameters", {})
        assert "CheckBootstrapVersion" not in template.get("Rules", {})
        assert "CDKMetadata" not in template["Resources"]

    def test_is_deterministic(self):
        """Test that identical inputs synthesize identical resources."""
        first = synthesize_template(DEPLOYMENT_NAME, BUCKET_NAME, FUNCTION_NAME)
        second = synthesize_template(DEPLOYMENT_NAME, BUCKET_NAME, FUNCTION_NAME)

        assert first["Resources"] == second["Resources"]

    def test_log_group_name_independent_of_deployment(self):
        """Test that the log group always points at the function's own name."""
        for deployment_name in ["tfn-0a1b2c3d", "other-9f8e7d6c"]:
            template = Template.from_json(synthesize_template(deployment_name, BUCKET_NAME, FUNCTION_NAME))
            function_id = _logical_id(template, "AWS::Lambda::Function")
            template.has_resource_properties(
                "AWS::Logs::LogGroup",
                {"LogGroupName": {"Fn::Join": ["", ["/aws/lambda/", {"Ref": function_id}]]}},
            )
