# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Picks the YAML config file for a construct from its stage or stack name."""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional
from aws_cdk import Stack, Stage
import constructs
from yamldataclassconfig.config import YamlDataClassConfig
from abc import ABCMeta


CONFIG_ROOT = Path(__file__).parent
DEFAULT_CONFIG_DIR = "dev"


def resolve_config_path(name: Optional[str], path: str, kind: str) -> Path:
    """Return CONFIG_ROOT/<name>/<path>, falling back to the dev directory."""
    default_path = CONFIG_ROOT.joinpath(DEFAULT_CONFIG_DIR, path)
    if not name:
        print(f"Construct created without a {kind} name. Using {default_path}")
        return default_path

    config_path = CONFIG_ROOT.joinpath(name.lower(), path)
    if not config_path.exists():
        print(f"Config file {path} for {kind} {name} not found. Using {default_path}")
        return default_path
    return config_path


def get_config_for_stage(scope: constructs.Construct, path: str) -> Path:
    stage = Stage.of(scope)
    return resolve_config_path(stage.stage_name if stage is not None else None, path, "stage")


def get_config_for_stack(scope: constructs.Construct, path: str) -> Path:
    return resolve_config_path(Stack.of(scope).stack_name, path, "stack")


@dataclass
class StageYamlDataClassConfig(YamlDataClassConfig, metaclass=ABCMeta):
    """YamlDataClassConfig whose FILE_PATH is resolved per stage or per stack."""

    def load_for_stage(self, scope):
        path = get_config_for_stage(scope, self.FILE_PATH)
        return super().load(path=path, path_is_absolute=True)

    def load_for_stack(self, scope):
        path = get_config_for_stack(scope, self.FILE_PATH)
        return super().load(path=path, path_is_absolute=True)
