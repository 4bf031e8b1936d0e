# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Shared fixtures for construct tests."""
import pytest
from aws_cdk import App, Stack, aws_ecr as ecr, aws_lambda as _lambda

from construct_helpers import make_account
from osml_cdk_constructs.osml_vpc import OSMLVpc, OSMLVpcProps


@pytest.fixture
def test_account():
    return make_account()


@pytest.fixture
def stack():
    app = App()
    return Stack(app, "TestStack")


@pytest.fixture
def osml_vpc(stack, test_account):
    return OSMLVpc(stack, "OSMLVpc", OSMLVpcProps(account=test_account))


@pytest.fixture
def container_codes(stack):
    """STAC and ingest image code pulled from ECR, so no local docker build is needed."""
    stac_repo = ecr.Repository.from_repository_name(stack, "StacRepo", "osml-stac")
    ingest_repo = ecr.Repository.from_repository_name(stack, "IngestRepo", "osml-ingest")
    return (
        _lambda.DockerImageCode.from_ecr(stac_repo),
        _lambda.DockerImageCode.from_ecr(ingest_repo),
    )
