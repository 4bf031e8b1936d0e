# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Deployment account descriptor shared by every OSML construct."""

import os
from dataclasses import dataclass

from aws_cdk import RemovalPolicy, region_info
from dotenv import load_dotenv


def get_partition(region: str) -> str:
    """Resolve the AWS partition (aws, aws-cn, aws-us-gov, ...) for a region."""
    partition = region_info.Fact.find(region, region_info.FactName.PARTITION)
    if not partition:
        raise ValueError(f"Unable to determine the AWS partition for region '{region}'")
    return partition


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class OSMLAccount:
    """The AWS account and region an OSML deployment targets."""

    id: str
    region: str
    name: str = "osml"
    prod_like: bool = False
    auth: bool = False

    @property
    def partition(self) -> str:
        return get_partition(self.region)

    @property
    def removal_policy(self) -> RemovalPolicy:
        return RemovalPolicy.RETAIN if self.prod_like else RemovalPolicy.DESTROY

    @classmethod
    def from_env(cls) -> "OSMLAccount":
        """Build an account from the environment (and a local .env file if present)."""
        load_dotenv()

        account_id = os.getenv("ACCOUNT_ID") or os.getenv("CDK_DEFAULT_ACCOUNT")
        region = os.getenv("REGION") or os.getenv("CDK_DEFAULT_REGION")
        if not account_id or not region:
            raise ValueError("ACCOUNT_ID and REGION must be set to describe the target account")

        return cls(
            id=account_id,
            region=region,
            name=os.getenv("ACCOUNT_NAME", "osml"),
            prod_like=_env_flag("PROD_LIKE"),
            auth=_env_flag("AUTH"),
        )
