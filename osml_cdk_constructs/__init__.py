# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from .osml_account import OSMLAccount, get_partition
from .osml_vpc import OSMLVpc, OSMLVpcProps
from .osml_restapi import OSMLRestApi, OSMLRestApiProps
from .osml_sm_role import OSMLSMRole, OSMLSMRoleProps
from .osml_sm_endpoint import EndpointConfigProductionVariant, OSMLSMEndpoint, OSMLSMEndpointProps
from .data_catalog.dc_config import DCDataplaneConfig
from .data_catalog.dc_dataplane import DCDataplane, DCDataplaneProps
from .data_catalog.roles.dc_lambda_role import DCLambdaRole, DCLambdaRoleProps
from .tile_server.ts_config import TSDataplaneConfig
from .tile_server.ts_dataplane import TSDataplane, TSDataplaneProps
from .tile_server.roles.ts_lambda_role import TSLambdaRole, TSLambdaRoleProps
from .tile_server.roles.ts_task_role import TSTaskRole, TSTaskRoleProps
from .osml_stack import OSMLDeploymentConfig, OSMLStack
