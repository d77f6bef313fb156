"""
Configuration loader with validation using Pydantic.
Supports environment variable substitution for path values.
"""

import os
import re
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from ..processors.records import CANONICAL_COLUMNS, ROSTER_COLUMN
from ..processors.selector import DEFAULT_TIMESTAMP_FORMATS, GroupKey


class ProcessingMode(str, Enum):
    """Which pipeline(s) a run executes."""
    LATEST = "latest"
    RECONCILE = "reconcile"
    FULL = "full"


class InputConfig(BaseModel):
    """Input file locations."""
    scan_report: Optional[str] = None
    roster: Optional[str] = None
    reference_table: Optional[str] = None
    sheet_name: Optional[str] = None
    delimiter: str = ","

    @field_validator('delimiter')
    @classmethod
    def validate_delimiter(cls, v):
        if len(v) != 1:
            raise ValueError('Delimiter must be a single character')
        return v


class ColumnsConfig(BaseModel):
    """Column headers of the scan report and roster."""
    workstation_name: str = CANONICAL_COLUMNS['workstation_name']
    last_hardware_scan: str = CANONICAL_COLUMNS['last_hardware_scan']
    last_logged_user_id: str = CANONICAL_COLUMNS['last_logged_user_id']
    primary_user_id: str = CANONICAL_COLUMNS['primary_user_id']
    ip_address: str = CANONICAL_COLUMNS['ip_address']
    subnet: str = CANONICAL_COLUMNS['subnet']
    pc_name: str = ROSTER_COLUMN

    def record_columns(self) -> Dict[str, str]:
        """Canonical field name -> header, without the roster column."""
        return {name: getattr(self, name) for name in CANONICAL_COLUMNS}


class SelectionConfig(BaseModel):
    """Latest-record selection configuration."""
    group_key: GroupKey = GroupKey.RAW
    timestamp_formats: List[str] = Field(
        default_factory=lambda: list(DEFAULT_TIMESTAMP_FORMATS)
    )

    @field_validator('timestamp_formats')
    @classmethod
    def validate_timestamp_formats(cls, v):
        if not v:
            raise ValueError('At least one timestamp format is required')
        return v


class NormalizationConfig(BaseModel):
    """Workstation name normalization configuration."""
    uppercase: bool = True


class OutputConfig(BaseModel):
    """Output configuration."""
    base_path: str = "./outputs"
    format: str = "csv"
    delimiter: str = ","
    create_date_subfolder: bool = False
    date_suffix: bool = True
    file_prefix: str = "workstation_inventory"

    @field_validator('format')
    @classmethod
    def validate_format(cls, v):
        if v.lower() not in ('csv', 'xlsx'):
            raise ValueError('Output format must be csv or xlsx')
        return v.lower()

    @field_validator('delimiter')
    @classmethod
    def validate_delimiter(cls, v):
        if len(v) != 1:
            raise ValueError('Delimiter must be a single character')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = "./logs/workstation_inventory.log"
    max_size_mb: int = 50
    backup_count: int = 7
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


class AppConfig(BaseModel):
    """Main application configuration."""
    mode: ProcessingMode = ProcessingMode.FULL
    inputs: InputConfig = InputConfig()
    columns: ColumnsConfig = ColumnsConfig()
    selection: SelectionConfig = SelectionConfig()
    normalization: NormalizationConfig = NormalizationConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()

    @model_validator(mode='after')
    def validate_mode_inputs(self):
        required = {
            ProcessingMode.LATEST: ['scan_report'],
            ProcessingMode.RECONCILE: ['roster', 'reference_table'],
            ProcessingMode.FULL: ['scan_report', 'roster'],
        }[self.mode]

        missing = [name for name in required if not getattr(self.inputs, name)]
        if missing:
            raise ValueError(
                f"Mode '{self.mode.value}' requires inputs: {', '.join(missing)}"
            )
        return self


def substitute_env_vars(value: str) -> str:
    """
    Substitute environment variables in a string.
    Format: ${VAR_NAME} or $VAR_NAME
    """
    if not isinstance(value, str):
        return value

    pattern = r'\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)'

    def replacer(match):
        var_name = match.group(1) or match.group(2)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise ValueError(f"Environment variable '{var_name}' is not set")
        return env_value

    return re.sub(pattern, replacer, value)


def process_dict(d: dict) -> dict:
    """Recursively process dictionary to substitute environment variables."""
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = process_dict(value)
        elif isinstance(value, list):
            result[key] = [
                process_dict(item) if isinstance(item, dict)
                else substitute_env_vars(item) if isinstance(item, str)
                else item
                for item in value
            ]
        elif isinstance(value, str):
            result[key] = substitute_env_vars(value)
        else:
            result[key] = value
    return result


def merge_overrides(raw_config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge dotted-key overrides (e.g. 'inputs.roster') into a raw config dict.
    None values are ignored so unset CLI flags keep the file's value.
    """
    merged = dict(raw_config)
    for dotted_key, value in overrides.items():
        if value is None:
            continue
        target = merged
        *parents, leaf = dotted_key.split('.')
        for part in parents:
            section = target.get(part)
            target[part] = dict(section) if isinstance(section, dict) else {}
            target = target[part]
        target[leaf] = value
    return merged


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to the configuration file, or None to build the
            configuration from overrides and defaults only
        overrides: Dotted-key values applied on top of the file

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing or validation fails
    """
    raw_config: Dict[str, Any] = {}

    if config_path is not None:
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f) or {}

    processed_config = process_dict(raw_config)
    processed_config = merge_overrides(processed_config, overrides or {})

    return AppConfig(**processed_config)


def create_output_directories(config: AppConfig) -> Path:
    """
    Create output directories based on configuration.

    Returns:
        Path of the folder exports are written to
    """
    output_path = Path(config.output.base_path)

    if config.output.create_date_subfolder:
        date_folder = datetime.now().strftime("%d-%m-%Y")
        output_path = output_path / date_folder

    output_path.mkdir(parents=True, exist_ok=True)

    if config.logging.file:
        Path(config.logging.file).parent.mkdir(parents=True, exist_ok=True)

    return output_path
