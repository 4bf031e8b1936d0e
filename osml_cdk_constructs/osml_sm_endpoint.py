# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""SageMaker model, endpoint config and endpoint for an OSML hosted model."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from aws_cdk import aws_ec2 as ec2, aws_sagemaker as sagemaker
from constructs import Construct
from yamldataclassconfig import create_file_path_field

from .config.config_mux import StageYamlDataClassConfig


@dataclass
class EndpointConfigProductionVariant(StageYamlDataClassConfig):
    """Endpoint Config Production Variant Dataclass."""

    initial_instance_count: int = 1
    initial_variant_weight: float = 1.0
    instance_type: str = "ml.m5.xlarge"
    variant_name: str = "AllTraffic"

    FILE_PATH: Path = create_file_path_field(
        "sm-endpoint.yml", path_is_absolute=True
    )


@dataclass
class OSMLSMEndpointProps:
    # sagemaker execution role arn to use for the model endpoint
    role_arn: str
    # URI to the container image that contains the model
    model_container: str
    # name of the model to host on the endpoint
    model_name: str
    # number of instances to start the endpoint with
    initial_instance_count: int
    # weight of the variant to start the endpoint with (0-1)
    initial_variant_weight: float
    # instance type to start the endpoint with (e.g. ml.m5.xlarge)
    instance_type: str
    # name of the variant to host the model on (e.g. 'AllTraffic')
    variant_name: str
    # vpc the model runs in
    vpc: ec2.IVpc
    # security group to use for vpc models
    vpc_security_group: ec2.ISecurityGroup
    # extra container environment, merged over MODEL_SELECTION
    environment: Optional[Dict[str, str]] = None

    @classmethod
    def from_variant(cls, variant: EndpointConfigProductionVariant, **kwargs) -> "OSMLSMEndpointProps":
        """Build props whose production variant settings come from a loaded YAML config."""
        return cls(
            initial_instance_count=variant.initial_instance_count,
            initial_variant_weight=variant.initial_variant_weight,
            instance_type=variant.instance_type,
            variant_name=variant.variant_name,
            **kwargs
        )


class OSMLSMEndpoint(Construct):
    def __init__(self, scope: Construct, id: str, props: OSMLSMEndpointProps) -> None:
        """Creates a SageMaker endpoint for the specified model."""
        super().__init__(scope, id)

        vpc_subnet_selection = props.vpc.select_subnets(
            subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS
        )

        environment = {"MODEL_SELECTION": props.model_name}
        if props.environment:
            environment.update(props.environment)

        self.model = sagemaker.CfnModel(
            self, id,
            execution_role_arn=props.role_arn,
            containers=[
                sagemaker.CfnModel.ContainerDefinitionProperty(
                    image=props.model_container,
                    environment=environment
                )
            ],
            vpc_config=sagemaker.CfnModel.VpcConfigProperty(
                subnets=vpc_subnet_selection.subnet_ids,
                security_group_ids=[props.vpc_security_group.security_group_id]
            ),
            primary_container=sagemaker.CfnModel.ContainerDefinitionProperty(
                image_config=sagemaker.CfnModel.ImageConfigProperty(
                    repository_access_mode="Vpc"
                )
            )
        )

        self.endpoint_config = sagemaker.CfnEndpointConfig(
            self, f"{id}-EndpointConfig",
            production_variants=[
                sagemaker.CfnEndpointConfig.ProductionVariantProperty(
                    initial_instance_count=props.initial_instance_count,
                    initial_variant_weight=props.initial_variant_weight,
                    instance_type=props.instance_type,
                    model_name=self.model.attr_model_name,
                    variant_name=props.variant_name
                )
            ]
        )

        # host a SageMaker endpoint on top of the model
        self.endpoint = sagemaker.CfnEndpoint(
            self, f"{id}-Endpoint",
            endpoint_config_name=self.endpoint_config.attr_endpoint_config_name,
            endpoint_name=props.model_name
        )
