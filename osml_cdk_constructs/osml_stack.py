# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Example stack wiring the OSML supporting services together."""

from dataclasses import dataclass
from typing import Optional

from aws_cdk import (
    CfnOutput,
    Stack,
    Stage,
    aws_ec2 as ec2,
    aws_ecr as ecr,
    aws_ecs as ecs,
    aws_lambda as _lambda,
)
from constructs import Construct

from .data_catalog.dc_dataplane import DCDataplane, DCDataplaneProps
from .osml_account import OSMLAccount
from .osml_sm_endpoint import (
    EndpointConfigProductionVariant,
    OSMLSMEndpoint,
    OSMLSMEndpointProps,
)
from .osml_sm_role import OSMLSMRole, OSMLSMRoleProps
from .osml_vpc import OSMLVpc, OSMLVpcProps
from .tile_server.ts_dataplane import TSDataplane, TSDataplaneProps


@dataclass(frozen=True)
class OSMLDeploymentConfig:
    """Container repositories and feature toggles for an OSML deployment."""

    stac_repository: str = "osml-data-catalog-stac"
    ingest_repository: str = "osml-data-catalog-ingest"
    tile_server_repository: str = "osml-tile-server"
    model_repository: str = "osml-models"
    image_tag: str = "latest"
    model_name: str = "centerpoint"
    sm_role_name: str = "OSMLSMRole"
    vpc_id: Optional[str] = None
    deploy_tile_server: bool = True
    deploy_sm_endpoint: bool = True


class OSMLStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, account: OSMLAccount,
                 deployment_config: Optional[OSMLDeploymentConfig] = None, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        config = deployment_config or OSMLDeploymentConfig()

        self.osml_vpc = OSMLVpc(
            self, "OSMLVpc",
            OSMLVpcProps(account=account, vpc_id=config.vpc_id)
        )

        self.dc_dataplane = DCDataplane(
            self, "DCDataplane",
            DCDataplaneProps(
                account=account,
                osml_vpc=self.osml_vpc,
                stac_code=self.docker_image_code("StacRepository", config.stac_repository, config.image_tag),
                ingest_code=self.docker_image_code("IngestRepository", config.ingest_repository, config.image_tag)
            )
        )

        self.ts_dataplane = None
        if config.deploy_tile_server:
            ts_repository = ecr.Repository.from_repository_name(
                self, "TileServerRepository", config.tile_server_repository
            )
            self.ts_dataplane = TSDataplane(
                self, "TSDataplane",
                TSDataplaneProps(
                    account=account,
                    osml_vpc=self.osml_vpc,
                    container_image=ecs.ContainerImage.from_ecr_repository(ts_repository, config.image_tag)
                )
            )

        self.sm_endpoint = None
        if config.deploy_sm_endpoint:
            self.sm_endpoint = self.create_sm_endpoint(account, config)

        CfnOutput(
            self, "DCIngestTopicArn",
            value=self.dc_dataplane.ingest_topic.topic_arn,
            description="ARN of the SNS topic STAC items are ingested from"
        )

        CfnOutput(
            self, "DCStacFunctionArn",
            value=self.dc_dataplane.stac_function.function_arn,
            description="ARN of the STAC FastAPI Lambda function"
        )

    def docker_image_code(self, id: str, repository_name: str, tag: str) -> _lambda.DockerImageCode:
        repository = ecr.Repository.from_repository_name(self, id, repository_name)
        return _lambda.DockerImageCode.from_ecr(repository, tag_or_digest=tag)

    def create_sm_endpoint(self, account: OSMLAccount, config: OSMLDeploymentConfig) -> OSMLSMEndpoint:
        sm_role = OSMLSMRole(
            self, "OSMLSMRole",
            OSMLSMRoleProps(account=account, role_name=config.sm_role_name)
        )

        model_security_group = self.osml_vpc.security_group or ec2.SecurityGroup(
            self, "OSMLModelSecurityGroup",
            vpc=self.osml_vpc.vpc,
            description="Security group for OversightML SageMaker endpoints"
        )

        model_repository = ecr.Repository.from_repository_name(
            self, "ModelRepository", config.model_repository
        )

        variant = EndpointConfigProductionVariant()
        # A named deployment stage takes precedence over the stack name
        if Stage.of(self).stage_name:
            variant.load_for_stage(self)
        else:
            variant.load_for_stack(self)

        return OSMLSMEndpoint(
            self, "OSMLSMEndpoint",
            OSMLSMEndpointProps.from_variant(
                variant,
                role_arn=sm_role.role.role_arn,
                model_container=model_repository.repository_uri_for_tag(config.image_tag),
                model_name=config.model_name,
                vpc=self.osml_vpc.vpc,
                vpc_security_group=model_security_group
            )
        )
