"""Configuration models for the flat-structure stacks."""

from .config import (
    AmiFilter,
    AwsStackConfig,
    AzureStackConfig,
    ImageReference,
    OsDiskConfig,
    StacksConfig,
    load_config,
)

__all__ = [
    "AmiFilter",
    "AwsStackConfig",
    "AzureStackConfig",
    "ImageReference",
    "OsDiskConfig",
    "StacksConfig",
    "load_config",
]
