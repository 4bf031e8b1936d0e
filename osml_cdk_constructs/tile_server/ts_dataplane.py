# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Tile server dataplane: job table and queues, a Fargate service and a job sweeper."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from aws_cdk import (
    Duration,
    aws_dynamodb as dynamodb,
    aws_ec2 as ec2,
    aws_ecs as ecs,
    aws_ecs_patterns as ecs_patterns,
    aws_events as events,
    aws_events_targets as targets,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_sqs as sqs,
)
from constructs import Construct

from ..osml_account import OSMLAccount
from ..osml_vpc import OSMLVpc
from .roles.ts_lambda_role import TSLambdaRole, TSLambdaRoleProps
from .roles.ts_task_role import TSTaskRole, TSTaskRoleProps
from .ts_config import TSDataplaneConfig

SWEEPER_ASSET_PATH = str(Path(__file__).parent.joinpath("sweeper"))


@dataclass
class TSDataplaneProps:
    account: OSMLAccount
    osml_vpc: OSMLVpc
    # tile server container image
    container_image: ecs.ContainerImage
    task_role: Optional[iam.IRole] = None
    lambda_role: Optional[iam.IRole] = None
    security_group_id: Optional[str] = None
    config: Optional[TSDataplaneConfig] = None


class TSDataplane(Construct):
    def __init__(self, scope: Construct, id: str, props: TSDataplaneProps) -> None:
        super().__init__(scope, id)

        self.setup(props)

        self.job_table = self.create_job_table(props)
        self.job_dlq, self.job_queue = self.create_job_queues()

        self.cluster = ecs.Cluster(
            self, "TSCluster",
            cluster_name=self.config.ECS_CLUSTER_NAME,
            vpc=props.osml_vpc.vpc
        )

        self.fargate_service = self.create_fargate_service(props)

        self.sweeper_function = self.create_sweeper_function(props)

        # The sweeper scans for stuck jobs on top of the item access its role already has
        self.job_table.grant(self.lambda_role, "dynamodb:Scan")

        self.sweeper_rule = events.Rule(
            self, "TSSweeperRule",
            description="Periodically fails tile server jobs stuck in progress",
            schedule=events.Schedule.rate(Duration.minutes(self.config.SWEEPER_SCHEDULE_MINUTES)),
            targets=[targets.LambdaFunction(self.sweeper_function)]
        )

    def setup(self, props: TSDataplaneProps) -> None:
        if props.config is not None:
            self.config = props.config
        else:
            self.config = TSDataplaneConfig()

        self.removal_policy = props.account.removal_policy

        if props.security_group_id:
            self.security_group = ec2.SecurityGroup.from_security_group_id(
                self, "TSImportSecurityGroup",
                props.security_group_id
            )
        else:
            self.security_group = ec2.SecurityGroup(
                self, "TSSecurityGroup",
                vpc=props.osml_vpc.vpc,
                description="Security group for the OversightML Tile Server",
                allow_all_outbound=True
            )

        if props.task_role is not None:
            self.task_role = props.task_role
        else:
            self.task_role = TSTaskRole(
                self, "TSTaskRole",
                TSTaskRoleProps(
                    account=props.account,
                    role_name=self.config.ECS_TASK_ROLE_NAME,
                    config=self.config
                )
            ).role

        if props.lambda_role is not None:
            self.lambda_role = props.lambda_role
        else:
            self.lambda_role = TSLambdaRole(
                self, "TSLambdaRole",
                TSLambdaRoleProps(
                    account=props.account,
                    role_name=self.config.LAMBDA_ROLE_NAME,
                    config=self.config
                )
            ).role

    def create_job_table(self, props: TSDataplaneProps) -> dynamodb.Table:
        return dynamodb.Table(
            self, "TSJobTable",
            table_name=self.config.DDB_JOB_TABLE,
            partition_key=dynamodb.Attribute(
                name="viewpoint_id",
                type=dynamodb.AttributeType.STRING
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            encryption=dynamodb.TableEncryption.AWS_MANAGED,
            time_to_live_attribute=self.config.DDB_TTL_ATTRIBUTE,
            point_in_time_recovery_specification=dynamodb.PointInTimeRecoverySpecification(
                point_in_time_recovery_enabled=props.account.prod_like
            ),
            removal_policy=self.removal_policy
        )

    def create_job_queues(self) -> Tuple[sqs.Queue, sqs.Queue]:
        dlq = sqs.Queue(
            self, "TSJobDLQ",
            queue_name=self.config.SQS_JOB_DLQ,
            encryption=sqs.QueueEncryption.SQS_MANAGED,
            removal_policy=self.removal_policy
        )

        queue = sqs.Queue(
            self, "TSJobQueue",
            queue_name=self.config.SQS_JOB_QUEUE,
            encryption=sqs.QueueEncryption.SQS_MANAGED,
            visibility_timeout=Duration.seconds(self.config.SQS_VISIBILITY_TIMEOUT),
            dead_letter_queue=sqs.DeadLetterQueue(
                max_receive_count=self.config.SQS_MAX_RECEIVE_COUNT,
                queue=dlq
            ),
            removal_policy=self.removal_policy
        )

        return dlq, queue

    def create_container_environment(self, props: TSDataplaneProps) -> Dict[str, str]:
        return {
            "AWS_DEFAULT_REGION": props.account.region,
            "JOB_TABLE": self.job_table.table_name,
            "JOB_QUEUE": self.job_queue.queue_name,
            "FASTAPI_ROOT_PATH": self.config.FASTAPI_ROOT_PATH,
        }

    def create_fargate_service(self, props: TSDataplaneProps) -> ecs_patterns.ApplicationLoadBalancedFargateService:
        task_definition = ecs.FargateTaskDefinition(
            self, "TSTaskDefinition",
            cpu=self.config.ECS_TASK_CPU,
            memory_limit_mib=self.config.ECS_TASK_MEMORY,
            task_role=self.task_role
        )

        task_definition.add_container(
            "TSContainer",
            container_name=self.config.ECS_CONTAINER_NAME,
            image=props.container_image,
            environment=self.create_container_environment(props),
            port_mappings=[ecs.PortMapping(container_port=self.config.ECS_CONTAINER_PORT)],
            logging=ecs.LogDrivers.aws_logs(stream_prefix=self.config.SERVICE_NAME_ABBREVIATION)
        )

        return ecs_patterns.ApplicationLoadBalancedFargateService(
            self, "TSService",
            cluster=self.cluster,
            task_definition=task_definition,
            desired_count=self.config.ECS_DESIRED_COUNT,
            public_load_balancer=False,
            assign_public_ip=False,
            security_groups=[self.security_group],
            task_subnets=props.osml_vpc.selected_subnets
        )

    def create_sweeper_function(self, props: TSDataplaneProps) -> _lambda.Function:
        return _lambda.Function(
            self, "TSSweeperFunction",
            function_name="TSJobSweeper",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="index.lambda_handler",
            code=_lambda.Code.from_asset(SWEEPER_ASSET_PATH),
            role=self.lambda_role,
            vpc=props.osml_vpc.vpc,
            vpc_subnets=props.osml_vpc.selected_subnets,
            security_groups=[self.security_group],
            memory_size=self.config.LAMBDA_MEMORY_SIZE,
            timeout=Duration.seconds(self.config.LAMBDA_TIMEOUT),
            environment={
                "JOB_TABLE": self.job_table.table_name,
                "JOB_TIMEOUT": str(self.config.JOB_TIMEOUT),
            },
            logging_format=_lambda.LoggingFormat.JSON
        )
