# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""IAM role shared by the data catalog STAC and ingest Lambdas."""

from dataclasses import dataclass

from aws_cdk import aws_iam as iam
from constructs import Construct

from ...osml_account import OSMLAccount, get_partition


@dataclass
class DCLambdaRoleProps:
    account: OSMLAccount
    role_name: str


class DCLambdaRole(Construct):
    def __init__(self, scope: Construct, id: str, props: DCLambdaRoleProps) -> None:
        super().__init__(scope, id)

        self.partition = get_partition(props.account.region)
        self.role = self.create_lambda_role(props.account, props.role_name)

    def create_lambda_role(self, account: OSMLAccount, role_name: str) -> iam.Role:
        role = iam.Role(
            self, "DCLambdaRole",
            role_name=role_name,
            assumed_by=iam.CompositePrincipal(
                iam.ServicePrincipal("lambda.amazonaws.com")
            ),
            description="Allows the OversightML Data Catalog Lambdas to access necessary AWS services (OpenSearch, SNS, CW, ...)"
        )

        # OpenSearch HTTP access
        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["es:ESHttp*"],
            resources=[
                f"arn:{self.partition}:es:{account.region}:{account.id}:domain/*"
            ]
        ))

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

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "sns:Subscribe",
                "sns:Receive"
            ],
            resources=[
                f"arn:{self.partition}:sns:{account.region}:{account.id}:*"
            ]
        ))

        return role
