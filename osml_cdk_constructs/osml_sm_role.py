# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""SageMaker execution role for OSML hosted models."""

from dataclasses import dataclass

from aws_cdk import aws_iam as iam
from constructs import Construct

from .osml_account import OSMLAccount, get_partition


@dataclass
class OSMLSMRoleProps:
    account: OSMLAccount
    role_name: str


class OSMLSMRole(Construct):
    def __init__(self, scope: Construct, id: str, props: OSMLSMRoleProps) -> None:
        super().__init__(scope, id)

        self.partition = get_partition(props.account.region)
        self.role = self.create_sagemaker_role(props.account, props.role_name)

    def create_sagemaker_role(self, account: OSMLAccount, role_name: str) -> iam.Role:
        arn_prefix = f"arn:{self.partition}"

        role = iam.Role(
            self, "OSMLSMRole",
            role_name=role_name,
            assumed_by=iam.CompositePrincipal(
                iam.ServicePrincipal("sagemaker.amazonaws.com")
            ),
            description="Allows SageMaker to host OversightML models inside the OSML VPC"
        )

        # Pull model containers
        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["ecr:GetAuthorizationToken"],
            resources=["*"]
        ))
        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "ecr:BatchCheckLayerAvailability",
                "ecr:BatchGetImage",
                "ecr:GetDownloadUrlForLayer"
            ],
            resources=[f"{arn_prefix}:ecr:{account.region}:{account.id}:repository/*"]
        ))

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "logs:CreateLogGroup",
                "logs:CreateLogStream",
                "logs:DescribeLogStreams",
                "logs:PutLogEvents"
            ],
            resources=[f"{arn_prefix}:logs:{account.region}:{account.id}:log-group:/aws/sagemaker/*"]
        ))

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["cloudwatch:PutMetricData"],
            resources=["*"]
        ))

        # VPC-attached endpoints manage their own network interfaces
        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "ec2:CreateNetworkInterface",
                "ec2:CreateNetworkInterfacePermission",
                "ec2:DeleteNetworkInterface",
                "ec2:DeleteNetworkInterfacePermission",
                "ec2:DescribeDhcpOptions",
                "ec2:DescribeNetworkInterfaces",
                "ec2:DescribeSecurityGroups",
                "ec2:DescribeSubnets",
                "ec2:DescribeVpcs"
            ],
            resources=["*"]
        ))

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "s3:GetObject",
                "s3:ListBucket"
            ],
            resources=[f"{arn_prefix}:s3:::*"]
        ))

        return role
