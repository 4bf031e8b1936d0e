# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Default configuration for the tile server dataplane."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TSDataplaneConfig:
    """Configuration for the TSDataplane construct and its roles."""

    DDB_JOB_TABLE: str = "TSJobTable"
    DDB_TTL_ATTRIBUTE: str = "expire_time"
    SQS_JOB_QUEUE: str = "TSJobQueue"
    SQS_JOB_DLQ: str = "TSJobQueueDLQ"
    SQS_VISIBILITY_TIMEOUT: int = 600  # seconds
    SQS_MAX_RECEIVE_COUNT: int = 3
    ECS_CLUSTER_NAME: str = "TSCluster"
    ECS_TASK_ROLE_NAME: str = "TSTaskRole"
    ECS_CONTAINER_NAME: str = "TSContainer"
    ECS_TASK_CPU: int = 4096
    ECS_TASK_MEMORY: int = 8192
    ECS_CONTAINER_PORT: int = 8080
    ECS_DESIRED_COUNT: int = 1
    LAMBDA_ROLE_NAME: str = "TSLambdaRole"
    LAMBDA_MEMORY_SIZE: int = 512
    LAMBDA_TIMEOUT: int = 300  # seconds
    SWEEPER_SCHEDULE_MINUTES: int = 5
    JOB_TIMEOUT: int = 1800  # seconds before an IN_PROGRESS job is considered stuck
    FASTAPI_ROOT_PATH: str = "tile-server"
    SERVICE_NAME_ABBREVIATION: str = "TS"
