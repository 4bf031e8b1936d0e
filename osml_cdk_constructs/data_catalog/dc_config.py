# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Default configuration for the data catalog dataplane."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DCDataplaneConfig:
    """
    Configuration for the DCDataplane construct.

    Supplying an instance to DCDataplaneProps replaces every default; there is
    no merging of partial overrides.
    """

    LAMBDA_ROLE_NAME: str = "DCLambdaRole"
    LAMBDA_MEMORY_SIZE: int = 4096
    LAMBDA_STORAGE_SIZE: int = 10  # GiB
    LAMBDA_TIMEOUT: int = 300  # seconds
    OS_DATA_NODES: int = 4
    OS_EBS_SIZE: int = 10  # GiB
    STAC_FASTAPI_BACKEND: str = "opensearch"
    STAC_FASTAPI_TITLE: str = "stac-fastapi-opensearch"
    STAC_FASTAPI_DESCRIPTION: str = "A STAC FastAPI with an OpenSearch backend"
    STAC_FASTAPI_VERSION: str = "2.4.1"
    # root path API Gateway serves the FastAPI app under
    STAC_FASTAPI_ROOT_PATH: str = "data-catalog"
    RELOAD: str = "true"
    ENVIRONMENT: str = "local"
    WEB_CONCURRENCY: str = "10"
    ES_PORT: str = "443"
    ES_USE_SSL: str = "true"
    ES_VERIFY_CERTS: str = "true"
    SERVICE_NAME_ABBREVIATION: str = "DC"
    SNS_INGEST_TOPIC_NAME: str = "osml-stac-ingest"
