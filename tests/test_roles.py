# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Tests for the IAM role constructs."""
import pytest
from aws_cdk import App, Stack
from aws_cdk.assertions import Template
from hypothesis import given, settings, strategies as st

from construct_helpers import make_account, normalized_statements
from osml_cdk_constructs.data_catalog.roles.dc_lambda_role import DCLambdaRole, DCLambdaRoleProps
from osml_cdk_constructs.osml_sm_role import OSMLSMRole, OSMLSMRoleProps
from osml_cdk_constructs.tile_server.roles.ts_lambda_role import TSLambdaRole, TSLambdaRoleProps
from osml_cdk_constructs.tile_server.roles.ts_task_role import TSTaskRole, TSTaskRoleProps


ENI_ACTIONS = sorted([
    "elasticloadbalancing:DescribeLoadBalancers",
    "ec2:CreateNetworkInterface",
    "ec2:DescribeNetworkInterfaces",
    "ec2:DeleteNetworkInterface",
    "ec2:DescribeInstances",
    "ec2:AttachNetworkInterface",
])

LOG_ACTIONS = sorted(["logs:CreateLogGroup", "logs:CreateLogStream", "logs:PutLogEvents"])

REGION_PARTITIONS = {
    "us-east-1": "aws",
    "us-west-2": "aws",
    "eu-central-1": "aws",
    "ap-southeast-2": "aws",
    "us-gov-west-1": "aws-us-gov",
    "us-gov-east-1": "aws-us-gov",
    "cn-north-1": "aws-cn",
    "cn-northwest-1": "aws-cn",
}

account_id_strategy = st.from_regex(r"[0-9]{12}", fullmatch=True)
region_strategy = st.sampled_from(sorted(REGION_PARTITIONS))


def expected_ts_lambda_statements(account_id, region, partition):
    return [
        {
            "Effect": "Allow",
            "Action": ["dynamodb:GetItem", "dynamodb:PutItem", "dynamodb:UpdateItem"],
            "Resource": [f"arn:{partition}:dynamodb:{region}:{account_id}:table/TSJobTable"],
        },
        {
            "Effect": "Allow",
            "Action": ["lambda:GetFunctionConfiguration"],
            "Resource": [f"arn:{partition}:lambda:{region}:{account_id}:function:*"],
        },
        {
            "Effect": "Allow",
            "Action": ENI_ACTIONS,
            "Resource": ["*"],
        },
        {
            "Effect": "Allow",
            "Action": LOG_ACTIONS,
            "Resource": [f"arn:{partition}:logs:{region}:{account_id}:*"],
        },
    ]


def synth_ts_lambda_role(account, role_name="TSLambdaRole"):
    stack = Stack(App(), "TSLambdaRoleStack")
    construct = TSLambdaRole(stack, "TSLambdaRole", TSLambdaRoleProps(account=account, role_name=role_name))
    return construct, Template.from_stack(stack)


class TestTSLambdaRole:

    def test_role_name_and_principal(self):
        construct, template = synth_ts_lambda_role(make_account(), role_name="MyTSLambdaRole")

        assert construct.role is not None
        assert construct.partition == "aws"
        template.resource_count_is("AWS::IAM::Role", 1)
        template.has_resource_properties("AWS::IAM::Role", {
            "RoleName": "MyTSLambdaRole",
            "AssumeRolePolicyDocument": {
                "Statement": [{
                    "Action": "sts:AssumeRole",
                    "Effect": "Allow",
                    "Principal": {"Service": "lambda.amazonaws.com"},
                }],
            },
        })

    def test_statements_for_default_account(self):
        _, template = synth_ts_lambda_role(make_account())

        assert normalized_statements(template) == expected_ts_lambda_statements(
            "123456789012", "us-east-1", "aws"
        )

    @given(account_id=account_id_strategy, region=region_strategy)
    @settings(max_examples=10, deadline=None)
    def test_statements_interpolate_account(self, account_id, region):
        """
        For any account id and known region, the statements are exactly the fixed
        action lists with ARNs built from that account id, region and partition.
        """
        _, template = synth_ts_lambda_role(make_account(id=account_id, region=region))

        assert normalized_statements(template) == expected_ts_lambda_statements(
            account_id, region, REGION_PARTITIONS[region]
        )

    def test_unknown_region_aborts_composition(self):
        with pytest.raises(ValueError):
            synth_ts_lambda_role(make_account(region="moon-base-1"))


class TestDCLambdaRole:

    def test_statements(self):
        stack = Stack(App(), "DCLambdaRoleStack")
        construct = DCLambdaRole(
            stack, "DCLambdaRole",
            DCLambdaRoleProps(account=make_account(region="us-gov-west-1"), role_name="DCLambdaRole")
        )
        template = Template.from_stack(stack)

        assert construct.partition == "aws-us-gov"
        template.has_resource_properties("AWS::IAM::Role", {"RoleName": "DCLambdaRole"})
        assert normalized_statements(template) == [
            {
                "Effect": "Allow",
                "Action": ["es:ESHttp*"],
                "Resource": ["arn:aws-us-gov:es:us-gov-west-1:123456789012:domain/*"],
            },
            {"Effect": "Allow", "Action": ENI_ACTIONS, "Resource": ["*"]},
            {
                "Effect": "Allow",
                "Action": LOG_ACTIONS,
                "Resource": ["arn:aws-us-gov:logs:us-gov-west-1:123456789012:*"],
            },
            {
                "Effect": "Allow",
                "Action": ["sns:Receive", "sns:Subscribe"],
                "Resource": ["arn:aws-us-gov:sns:us-gov-west-1:123456789012:*"],
            },
        ]


class TestTSTaskRole:

    def test_scoped_to_job_resources(self):
        stack = Stack(App(), "TSTaskRoleStack")
        TSTaskRole(stack, "TSTaskRole", TSTaskRoleProps(account=make_account(), role_name="TSTaskRole"))
        template = Template.from_stack(stack)

        template.has_resource_properties("AWS::IAM::Role", {
            "RoleName": "TSTaskRole",
            "AssumeRolePolicyDocument": {
                "Statement": [{
                    "Action": "sts:AssumeRole",
                    "Effect": "Allow",
                    "Principal": {"Service": "ecs-tasks.amazonaws.com"},
                }],
            },
        })

        resources = [r for statement in normalized_statements(template) for r in statement["Resource"]]
        assert "arn:aws:dynamodb:us-east-1:123456789012:table/TSJobTable" in resources
        assert "arn:aws:sqs:us-east-1:123456789012:TSJobQueue" in resources
        assert "arn:aws:sqs:us-east-1:123456789012:TSJobQueueDLQ" in resources


class TestOSMLSMRole:

    def test_sagemaker_principal(self):
        stack = Stack(App(), "SMRoleStack")
        construct = OSMLSMRole(stack, "SMRole", OSMLSMRoleProps(account=make_account(), role_name="OSMLSMRole"))
        template = Template.from_stack(stack)

        assert construct.partition == "aws"
        template.has_resource_properties("AWS::IAM::Role", {
            "RoleName": "OSMLSMRole",
            "AssumeRolePolicyDocument": {
                "Statement": [{
                    "Action": "sts:AssumeRole",
                    "Effect": "Allow",
                    "Principal": {"Service": "sagemaker.amazonaws.com"},
                }],
            },
        })

        actions = [a for statement in normalized_statements(template) for a in statement["Action"]]
        assert "ecr:BatchGetImage" in actions
        assert "ec2:CreateNetworkInterface" in actions
