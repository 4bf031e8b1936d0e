# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""IAM role for the tile server job sweeper Lambda."""

from dataclasses import dataclass, field

from aws_cdk import aws_iam as iam
from constructs import Construct

from ...osml_account import OSMLAccount, get_partition
from ..ts_config import TSDataplaneConfig


@dataclass
class TSLambdaRoleProps:
    # the OSML deployment account the role lives in
    account: OSMLAccount
    # the name to give to the role
    role_name: str
    # names of the tile server resources the role is scoped to
    config: TSDataplaneConfig = field(default_factory=TSDataplaneConfig)


class TSLambdaRole(Construct):
    """
    Creates the role assumed by the tile server Lambda sweeper.

    The partition is resolved from the account region; an unknown region
    raises a ValueError and aborts synthesis.
    """

    def __init__(self, scope: Construct, id: str, props: TSLambdaRoleProps) -> None:
        super().__init__(scope, id)

        self.ts_dataplane_config = props.config
        self.partition = get_partition(props.account.region)

        self.role = self.create_lambda_role(props.account, props.role_name)

    def create_lambda_role(self, account: OSMLAccount, role_name: str) -> iam.Role:
        role = iam.Role(
            self, "TSLambdaRole",
            role_name=role_name,
            assumed_by=iam.CompositePrincipal(
                iam.ServicePrincipal("lambda.amazonaws.com")
            ),
            description="Allows the OversightML Tile Server Lambda Sweeper to access necessary AWS services (CW, SQS, DynamoDB, ...)"
        )

        # DynamoDB job table access
        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "dynamodb:GetItem",
                "dynamodb:PutItem",
                "dynamodb:UpdateItem"
            ],
            resources=[
                f"arn:{self.partition}:dynamodb:{account.region}:{account.id}:table/{self.ts_dataplane_config.DDB_JOB_TABLE}"
            ]
        ))

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["lambda:GetFunctionConfiguration"],
            resources=[
                f"arn:{self.partition}:lambda:{account.region}:{account.id}:function:*"
            ]
        ))

        # VPC / subnet / ELB access for a VPC-attached function
        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "elasticloadbalancing:DescribeLoadBalancers",
                "ec2:CreateNetworkInterface",
                "ec2:DescribeNetworkInterfaces",
                "ec2:DeleteNetworkInterface",
                "ec2:DescribeInstances",
                "ec2:AttachNetworkInterface"
            ],
            resources=["*"]
        ))

        # CloudWatch Logs permissions
        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "logs:CreateLogGroup",
                "logs:CreateLogStream",
                "logs:PutLogEvents"
            ],
            resources=[
                f"arn:{self.partition}:logs:{account.region}:{account.id}:*"
            ]
        ))

        return role
