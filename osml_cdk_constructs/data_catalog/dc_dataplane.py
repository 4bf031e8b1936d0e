# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Data catalog dataplane: a STAC FastAPI and ingest Lambda backed by OpenSearch."""

from dataclasses import dataclass
from typing import Dict, Optional

from aws_cdk import (
    Duration,
    Size,
    aws_apigateway as apigw,
    aws_ec2 as ec2,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_opensearchservice as opensearch,
    aws_sns as sns,
    aws_sns_subscriptions as subscriptions,
)
from constructs import Construct

from ..osml_account import OSMLAccount
from ..osml_restapi import OSMLRestApi, OSMLRestApiProps
from ..osml_vpc import OSMLVpc
from .dc_config import DCDataplaneConfig
from .roles.dc_lambda_role import DCLambdaRole, DCLambdaRoleProps


@dataclass
class DCDataplaneProps:
    account: OSMLAccount
    osml_vpc: OSMLVpc
    # container image for the STAC FastAPI Lambda
    stac_code: _lambda.DockerImageCode
    # container image for the STAC item ingest Lambda
    ingest_code: _lambda.DockerImageCode
    # topic to subscribe the ingest Lambda to, created when omitted
    ingest_topic: Optional[sns.ITopic] = None
    security_group_id: Optional[str] = None
    lambda_role: Optional[iam.IRole] = None
    config: Optional[DCDataplaneConfig] = None


class DCDataplane(Construct):
    """
    Deploys the data catalog: an OpenSearch domain holding STAC items, a
    FastAPI Lambda serving them and an ingest Lambda fed from an SNS topic.

    Optional collaborators (config, security group, topic, role) are adopted
    as given or created with defaults, each decided independently in setup().
    When the account requires auth the STAC Lambda is fronted by a REST API.
    """

    def __init__(self, scope: Construct, id: str, props: DCDataplaneProps) -> None:
        super().__init__(scope, id)

        self.setup(props)

        self.os_domain = self.create_os_domain(props)

        self.environment = self.create_environment()

        self.stac_function = self.create_function(
            props, "DCStacFunction", "DCStacLambda", props.stac_code
        )

        # Allow the lambda to connect to opensearch
        self.os_domain.connections.allow_from(self.stac_function, ec2.Port.tcp(443))

        self.rest_api = None
        if props.account.auth:
            self.rest_api = OSMLRestApi(
                self, "DCRestApi",
                OSMLRestApiProps(
                    account=props.account,
                    name=self.config.SERVICE_NAME_ABBREVIATION,
                    api_stage_name=self.config.STAC_FASTAPI_ROOT_PATH,
                    integration=apigw.LambdaIntegration(self.stac_function)
                )
            )

        self.ingest_function = self.create_function(
            props, "DCIngestFunction", "DCIngestLambda", props.ingest_code
        )

        self.ingest_topic.add_subscription(
            subscriptions.LambdaSubscription(self.ingest_function)
        )

        self.os_domain.connections.allow_from(self.ingest_function, ec2.Port.tcp(443))

    def setup(self, props: DCDataplaneProps) -> None:
        """Resolve the config and every optional collaborator, reusing what the caller supplied."""
        if props.config is not None:
            self.config = props.config
        else:
            self.config = DCDataplaneConfig()

        if props.security_group_id:
            self.security_group = ec2.SecurityGroup.from_security_group_id(
                self, "DCImportSecurityGroup",
                props.security_group_id
            )
        else:
            self.security_group = ec2.SecurityGroup(
                self, "DCSecurityGroup",
                vpc=props.osml_vpc.vpc,
                description="Security group for the OversightML Data Catalog",
                allow_all_outbound=True
            )

        if props.ingest_topic is not None:
            self.ingest_topic = props.ingest_topic
        else:
            self.ingest_topic = sns.Topic(
                self, "DCIngestTopic",
                topic_name=self.config.SNS_INGEST_TOPIC_NAME
            )

        self.removal_policy = props.account.removal_policy

        if props.lambda_role is not None:
            self.lambda_role = props.lambda_role
        else:
            self.lambda_role = DCLambdaRole(
                self, "DCLambdaRole",
                DCLambdaRoleProps(
                    account=props.account,
                    role_name=self.config.LAMBDA_ROLE_NAME
                )
            ).role

    def create_os_domain(self, props: DCDataplaneProps) -> opensearch.Domain:
        osml_vpc = props.osml_vpc
        # zone awareness needs 2 or 3 AZs, one selected subnet per AZ
        zone_count = len(osml_vpc.subnet_ids)
        zone_awareness_enabled = zone_count > 1

        domain = opensearch.Domain(
            self, "DCOSDomain",
            version=opensearch.EngineVersion.OPENSEARCH_2_11,
            node_to_node_encryption=True,
            enforce_https=True,
            encryption_at_rest=opensearch.EncryptionAtRestOptions(enabled=True),
            vpc=osml_vpc.vpc,
            vpc_subnets=[osml_vpc.selected_subnets],
            security_groups=[self.security_group],
            capacity=opensearch.CapacityConfig(
                data_nodes=self.config.OS_DATA_NODES,
                multi_az_with_standby_enabled=False
            ),
            ebs=opensearch.EbsOptions(
                volume_size=self.config.OS_EBS_SIZE,
                volume_type=ec2.EbsDeviceVolumeType.GP3
            ),
            zone_awareness=opensearch.ZoneAwarenessConfig(
                enabled=zone_awareness_enabled,
                availability_zone_count=zone_count if zone_awareness_enabled else None
            ),
            removal_policy=self.removal_policy
        )

        domain.add_access_policies(iam.PolicyStatement(
            principals=[iam.AnyPrincipal()],
            actions=["es:ESHttp*"],
            resources=[f"{domain.domain_arn}/*"]
        ))

        return domain

    def create_environment(self) -> Dict[str, str]:
        """Environment shared by the STAC and ingest containers."""
        return {
            "STAC_FASTAPI_TITLE": self.config.STAC_FASTAPI_TITLE,
            "STAC_FASTAPI_DESCRIPTION": self.config.STAC_FASTAPI_DESCRIPTION,
            "STAC_FASTAPI_VERSION": self.config.STAC_FASTAPI_VERSION,
            "RELOAD": self.config.RELOAD,
            "ENVIRONMENT": self.config.ENVIRONMENT,
            "WEB_CONCURRENCY": self.config.WEB_CONCURRENCY,
            "ES_HOST": self.os_domain.domain_endpoint,
            "ES_PORT": self.config.ES_PORT,
            "ES_USE_SSL": self.config.ES_USE_SSL,
            "ES_VERIFY_CERTS": self.config.ES_VERIFY_CERTS,
            "STAC_FASTAPI_ROOT_PATH": f"/{self.config.STAC_FASTAPI_ROOT_PATH}",
        }

    def create_function(self, props: DCDataplaneProps, id: str, function_name: str,
                        code: _lambda.DockerImageCode) -> _lambda.DockerImageFunction:
        return _lambda.DockerImageFunction(
            self, id,
            function_name=function_name,
            code=code,
            role=self.lambda_role,
            vpc=props.osml_vpc.vpc,
            vpc_subnets=props.osml_vpc.selected_subnets,
            security_groups=[self.security_group],
            timeout=Duration.seconds(self.config.LAMBDA_TIMEOUT),
            ephemeral_storage_size=Size.gibibytes(self.config.LAMBDA_STORAGE_SIZE),
            memory_size=self.config.LAMBDA_MEMORY_SIZE,
            environment=self.environment,
            logging_format=_lambda.LoggingFormat.JSON
        )
