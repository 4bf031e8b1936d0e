# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""API Gateway front door for OSML services that require authenticated access."""

from dataclasses import dataclass

from aws_cdk import aws_apigateway as apigw
from constructs import Construct

from .osml_account import OSMLAccount


@dataclass
class OSMLRestApiProps:
    account: OSMLAccount
    # short service name, e.g. "DC"
    name: str
    # stage the API is served under; also the base path the backend expects
    api_stage_name: str
    integration: apigw.Integration


class OSMLRestApi(Construct):
    """Declares an IAM-authorized REST API that proxies every path to one integration."""

    def __init__(self, scope: Construct, id: str, props: OSMLRestApiProps) -> None:
        super().__init__(scope, id)

        self.rest_api = apigw.RestApi(
            self, "RestApi",
            rest_api_name=f"{props.name}Dataplane",
            description=f"OversightML {props.name} service API",
            endpoint_types=[apigw.EndpointType.REGIONAL],
            cloud_watch_role=False,
            deploy_options=apigw.StageOptions(stage_name=props.api_stage_name),
            default_integration=props.integration,
            default_method_options=apigw.MethodOptions(
                authorization_type=apigw.AuthorizationType.IAM
            )
        )

        self.rest_api.root.add_method("ANY")
        self.rest_api.root.add_proxy(any_method=True)

        self.rest_api.apply_removal_policy(props.account.removal_policy)
