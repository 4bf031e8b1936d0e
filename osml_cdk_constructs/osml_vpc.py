# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Network context (VPC, subnet selection, security group) for OSML services."""

from dataclasses import dataclass
from typing import List, Optional

from aws_cdk import aws_ec2 as ec2
from constructs import Construct

from .osml_account import OSMLAccount


@dataclass
class OSMLVpcProps:
    account: OSMLAccount
    vpc_id: Optional[str] = None
    target_subnets: Optional[List[str]] = None
    security_group_id: Optional[str] = None
    max_azs: int = 2


class OSMLVpc(Construct):
    """Imports an existing VPC or creates a new one and selects the subnets OSML runs in."""

    def __init__(self, scope: Construct, id: str, props: OSMLVpcProps) -> None:
        super().__init__(scope, id)

        self.removal_policy = props.account.removal_policy

        if props.vpc_id:
            self.vpc = ec2.Vpc.from_lookup(self, "ImportedVpc", vpc_id=props.vpc_id)
        else:
            self.vpc = ec2.Vpc(
                self, "Vpc",
                vpc_name=f"{props.account.name}-vpc",
                max_azs=props.max_azs,
                subnet_configuration=[
                    ec2.SubnetConfiguration(
                        name="Public",
                        subnet_type=ec2.SubnetType.PUBLIC,
                        cidr_mask=24
                    ),
                    ec2.SubnetConfiguration(
                        name="Private",
                        subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS,
                        cidr_mask=24
                    )
                ]
            )
            self.vpc.apply_removal_policy(self.removal_policy)

        if props.target_subnets:
            self.selected_subnets = ec2.SubnetSelection(
                subnet_filters=[ec2.SubnetFilter.by_ids(props.target_subnets)]
            )
        else:
            self.selected_subnets = ec2.SubnetSelection(
                subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS
            )

        self.subnet_ids = self.vpc.select_subnets(
            subnet_type=self.selected_subnets.subnet_type,
            subnet_filters=self.selected_subnets.subnet_filters
        ).subnet_ids

        self.security_group = None
        if props.security_group_id:
            self.security_group = ec2.SecurityGroup.from_security_group_id(
                self, "ImportedSecurityGroup",
                props.security_group_id
            )
