#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Read tuning and gateway settings (JSON/YAML) into TuningSettings and GatewayConfig."""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List

from ruamel.yaml import YAML

from hubtune.tuner.actions.gateway import GatewayConfig
from hubtune.tuner.configs.tuning_settings import TuningSettings
from hubtune.tuner.utils.exceptions import ConfigValueValidationError, FileOperationError
from hubtune.tuner.utils.logger_utils import TunerLogger

SECTION_TUNING = "tuning"
SECTION_GATEWAY = "gateway"

GATEWAY_KEYS = ("internal_interface", "internal_subnet", "mtu")

# kernel identifiers such as bbr, cubic, fq, fq_codel
KERNEL_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")


def validate_tuning_value(key: str, value: Any, expected_type: type) -> Any:
    if expected_type is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigValueValidationError(key, value, "must be an integer")
        minimum = 0 if key == "irq_core" else 1
        if value < minimum:
            raise ConfigValueValidationError(key, value, f"must be at least {minimum}")
    elif key == "latency_marker":
        if not isinstance(value, str) or not os.path.isabs(value):
            raise ConfigValueValidationError(key, value, "must be an absolute path")
    elif not isinstance(value, str) or not KERNEL_NAME_RE.match(value):
        raise ConfigValueValidationError(key, value, "must be a kernel module/algorithm name")
    return value


class SettingsFileHandler:
    """Loads an optional settings file.

    Values from the file are layered over the built-in defaults; values given
    on the command line are layered over the file.
    """

    def __init__(self):
        self.tuning_values: Dict[str, Any] = {}
        self.gateway_values: Dict[str, Any] = {}

    def load_from_file(self, settings_file_path: str) -> List[str]:
        """Load and validate a settings file.

        Returns:
            The keys that were not recognized (and were ignored)

        Raises:
            FileOperationError: If the file cannot be read or parsed
            ConfigValueValidationError: If a recognized key has an invalid value
        """
        settings_path = Path(settings_file_path)
        if not settings_path.exists():
            raise FileOperationError(f"Settings file not found: {settings_file_path}")

        settings_data = self._parse_settings_file(settings_path)
        if not isinstance(settings_data, dict):
            raise FileOperationError("Settings file must contain a dictionary/object at root level")

        unknown = [str(key) for key in settings_data if key not in (SECTION_TUNING, SECTION_GATEWAY)]
        unknown.extend(self._load_tuning_section(settings_data.get(SECTION_TUNING) or {}))
        unknown.extend(self._load_gateway_section(settings_data.get(SECTION_GATEWAY) or {}))
        for key in unknown:
            TunerLogger.warning(f"Unknown item in settings file: {key}")
        return unknown

    def _parse_settings_file(self, settings_path: Path) -> Dict[str, Any]:
        try:
            if settings_path.suffix.lower() == ".json":
                with open(settings_path, "r") as f:
                    return json.load(f)
            # YAML is a superset of JSON, so anything else goes through ruamel
            yaml = YAML(typ="safe", pure=True)
            with open(settings_path, "r") as f:
                return yaml.load(f) or {}
        except Exception as e:
            raise FileOperationError(f"Failed to parse settings file {settings_path}: {e}")

    def _load_tuning_section(self, section: Dict[str, Any]) -> List[str]:
        if not isinstance(section, dict):
            raise ConfigValueValidationError(SECTION_TUNING, section, "must be a mapping")
        field_types = TuningSettings.field_types()
        unknown = []
        for key, value in section.items():
            if key not in field_types:
                unknown.append(f"{SECTION_TUNING}.{key}")
                continue
            self.tuning_values[key] = validate_tuning_value(key, value, field_types[key])
            TunerLogger.debug(f"Set tuning item {key} = {value}")
        return unknown

    def _load_gateway_section(self, section: Dict[str, Any]) -> List[str]:
        if not isinstance(section, dict):
            raise ConfigValueValidationError(SECTION_GATEWAY, section, "must be a mapping")
        unknown = []
        for key, value in section.items():
            if key not in GATEWAY_KEYS:
                unknown.append(f"{SECTION_GATEWAY}.{key}")
                continue
            self.gateway_values[key] = value
        # validate now so a bad file fails before anything runs
        GatewayConfig(**self.gateway_values)
        return unknown

    def tuning_settings(self, **overrides) -> TuningSettings:
        return TuningSettings(**self.tuning_values).with_overrides(**overrides)

    def gateway_config(self, **overrides) -> GatewayConfig:
        values = dict(self.gateway_values)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return GatewayConfig(**values)
