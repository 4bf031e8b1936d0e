# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""IAM role for the tile server ECS task."""

from dataclasses import dataclass, field

from aws_cdk import aws_iam as iam
from constructs import Construct

from ...osml_account import OSMLAccount, get_partition
from ..ts_config import TSDataplaneConfig


@dataclass
class TSTaskRoleProps:
    account: OSMLAccount
    role_name: str
    config: TSDataplaneConfig = field(default_factory=TSDataplaneConfig)


class TSTaskRole(Construct):
    def __init__(self, scope: Construct, id: str, props: TSTaskRoleProps) -> None:
        super().__init__(scope, id)

        self.ts_dataplane_config = props.config
        self.partition = get_partition(props.account.region)

        self.role = self.create_task_role(props.account, props.role_name)

    def create_task_role(self, account: OSMLAccount, role_name: str) -> iam.Role:
        config = self.ts_dataplane_config
        arn_prefix = f"arn:{self.partition}"

        role = iam.Role(
            self, "TSTaskRole",
            role_name=role_name,
            assumed_by=iam.CompositePrincipal(
                iam.ServicePrincipal("ecs-tasks.amazonaws.com")
            ),
            description="Allows the OversightML Tile Server to access necessary AWS services (S3, SQS, DynamoDB, ...)"
        )

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "dynamodb:BatchGetItem",
                "dynamodb:BatchWriteItem",
                "dynamodb:DeleteItem",
                "dynamodb:GetItem",
                "dynamodb:PutItem",
                "dynamodb:Query",
                "dynamodb:Scan",
                "dynamodb:UpdateItem"
            ],
            resources=[
                f"{arn_prefix}:dynamodb:{account.region}:{account.id}:table/{config.DDB_JOB_TABLE}"
            ]
        ))

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "sqs:ChangeMessageVisibility",
                "sqs:DeleteMessage",
                "sqs:GetQueueAttributes",
                "sqs:GetQueueUrl",
                "sqs:ReceiveMessage",
                "sqs:SendMessage"
            ],
            resources=[
                f"{arn_prefix}:sqs:{account.region}:{account.id}:{config.SQS_JOB_QUEUE}",
                f"{arn_prefix}:sqs:{account.region}:{account.id}:{config.SQS_JOB_DLQ}"
            ]
        ))

        # Read access to imagery in any bucket the caller points the tile server at
        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "s3:GetBucketLocation",
                "s3:GetObject",
                "s3:ListBucket"
            ],
            resources=[f"{arn_prefix}:s3:::*"]
        ))

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "kms:Decrypt",
                "kms:DescribeKey",
                "kms:GenerateDataKey"
            ],
            resources=[f"{arn_prefix}:kms:{account.region}:{account.id}:key/*"]
        ))

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "logs:CreateLogGroup",
                "logs:CreateLogStream",
                "logs:PutLogEvents"
            ],
            resources=[f"{arn_prefix}:logs:{account.region}:{account.id}:*"]
        ))

        role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "xray:PutTelemetryRecords",
                "xray:PutTraceSegments"
            ],
            resources=["*"]
        ))

        return role
