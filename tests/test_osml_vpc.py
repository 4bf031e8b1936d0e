# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Tests for the OSML network context."""
import pytest
from aws_cdk import App, Environment, Stack, aws_ecr as ecr, aws_lambda as _lambda
from aws_cdk.assertions import Match, Template

from construct_helpers import TEST_ACCOUNT_ID, TEST_REGION, make_account
from osml_cdk_constructs.data_catalog.dc_dataplane import DCDataplane, DCDataplaneProps
from osml_cdk_constructs.osml_vpc import OSMLVpc, OSMLVpcProps

# Vpc.from_lookup resolves to these placeholders until cdk.context.json holds real values
LOOKUP_VPC_ID = "vpc-12345"
LOOKUP_PRIVATE_SUBNETS = ["p-12345", "p-67890"]


@pytest.fixture
def env_stack():
    return Stack(App(), "LookupStack", env=Environment(account=TEST_ACCOUNT_ID, region=TEST_REGION))


class TestNewVpc:

    def test_creates_vpc_with_private_subnets(self, stack, test_account):
        osml_vpc = OSMLVpc(stack, "OSMLVpc", OSMLVpcProps(account=test_account))
        template = Template.from_stack(stack)

        template.resource_count_is("AWS::EC2::VPC", 1)
        template.has_resource("AWS::EC2::VPC", {"DeletionPolicy": "Delete"})
        assert len(osml_vpc.subnet_ids) == 2
        assert osml_vpc.security_group is None

    def test_prod_like_retains_vpc(self, stack):
        OSMLVpc(stack, "OSMLVpc", OSMLVpcProps(account=make_account(prod_like=True)))
        template = Template.from_stack(stack)

        template.has_resource("AWS::EC2::VPC", {"DeletionPolicy": "Retain"})


class TestExistingNetwork:

    def test_vpc_id_is_looked_up(self, env_stack, test_account):
        osml_vpc = OSMLVpc(env_stack, "OSMLVpc", OSMLVpcProps(account=test_account, vpc_id=LOOKUP_VPC_ID))
        template = Template.from_stack(env_stack)

        template.resource_count_is("AWS::EC2::VPC", 0)
        assert osml_vpc.vpc.vpc_id == LOOKUP_VPC_ID
        assert osml_vpc.subnet_ids == LOOKUP_PRIVATE_SUBNETS

    def test_target_subnets_narrow_the_selection(self, env_stack, test_account):
        osml_vpc = OSMLVpc(
            env_stack, "OSMLVpc",
            OSMLVpcProps(account=test_account, vpc_id=LOOKUP_VPC_ID, target_subnets=["p-67890"])
        )

        assert osml_vpc.subnet_ids == ["p-67890"]
        assert osml_vpc.selected_subnets.subnet_filters is not None

    def test_security_group_is_imported(self, stack, test_account):
        osml_vpc = OSMLVpc(
            stack, "OSMLVpc",
            OSMLVpcProps(account=test_account, security_group_id="sg-0123456789abcdef0")
        )

        assert osml_vpc.security_group.security_group_id == "sg-0123456789abcdef0"


class TestDomainZoneAwareness:

    def build_dataplane(self, stack, osml_vpc):
        stac_repo = ecr.Repository.from_repository_name(stack, "StacRepo", "osml-stac")
        ingest_repo = ecr.Repository.from_repository_name(stack, "IngestRepo", "osml-ingest")
        return DCDataplane(
            stack, "DCDataplane",
            DCDataplaneProps(
                account=make_account(),
                osml_vpc=osml_vpc,
                stac_code=_lambda.DockerImageCode.from_ecr(stac_repo),
                ingest_code=_lambda.DockerImageCode.from_ecr(ingest_repo),
            )
        )

    def test_spans_every_selected_subnet(self, env_stack, test_account):
        osml_vpc = OSMLVpc(env_stack, "OSMLVpc", OSMLVpcProps(account=test_account, vpc_id=LOOKUP_VPC_ID))
        self.build_dataplane(env_stack, osml_vpc)
        template = Template.from_stack(env_stack)

        template.has_resource_properties("AWS::OpenSearchService::Domain", {
            "ClusterConfig": Match.object_like({
                "ZoneAwarenessEnabled": True,
                "ZoneAwarenessConfig": {"AvailabilityZoneCount": 2},
            }),
            "VPCOptions": Match.object_like({"SubnetIds": LOOKUP_PRIVATE_SUBNETS}),
        })

    def test_single_subnet_disables_zone_awareness(self, env_stack, test_account):
        osml_vpc = OSMLVpc(
            env_stack, "OSMLVpc",
            OSMLVpcProps(account=test_account, vpc_id=LOOKUP_VPC_ID, target_subnets=["p-12345"])
        )
        self.build_dataplane(env_stack, osml_vpc)
        template = Template.from_stack(env_stack)

        template.has_resource_properties("AWS::OpenSearchService::Domain", {
            "ClusterConfig": Match.object_like({"ZoneAwarenessEnabled": False}),
            "VPCOptions": Match.object_like({"SubnetIds": ["p-12345"]}),
        })
