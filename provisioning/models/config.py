"""Stack configuration schema."""

import ipaddress
from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator


DEFAULT_USER_DATA = """
        #! /bin/bash
        sudo yum update -y
        sudo touch /home/ec2-user/USERDATA_EXECUTED
        """


def _check_cidr(value: str) -> str:
    try:
        ipaddress.ip_network(value)
    except ValueError as e:
        raise ValueError(f"Invalid CIDR block: {value}") from e
    return value


class AmiFilter(BaseModel):
    """AMI lookup settings."""

    owners: list[str] = Field(default_factory=lambda: ["amazon"])
    name_pattern: str = "amzn2-ami-kernel-5*"
    most_recent: bool = True


class AwsStackConfig(BaseModel):
    """AWS network and EC2 instance configuration."""

    region: str = "eu-south-1"
    vpc_cidr: str = "10.0.0.0/16"
    subnet_cidr: str = "10.0.0.0/24"
    default_route_cidr: str = "0.0.0.0/0"
    ami: AmiFilter = Field(default_factory=AmiFilter)
    security_group_name: str = "sg_allow_ssh"
    ssh_port: int = 22
    instance_type: str = "t3.micro"
    associate_public_ip: bool = True
    user_data: str = DEFAULT_USER_DATA

    @field_validator("vpc_cidr", "subnet_cidr", "default_route_cidr")
    @classmethod
    def validate_cidr(cls, v: str) -> str:
        """Validate CIDR notation."""
        return _check_cidr(v)

    @field_validator("ssh_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError(f"Port out of range: {v}")
        return v


class ImageReference(BaseModel):
    """Marketplace image for the Linux VM."""

    publisher: str = "Canonical"
    offer: str = "UbuntuServer"
    sku: str = "16.04-LTS"
    version: str = "latest"


class OsDiskConfig(BaseModel):
    caching: str = "ReadWrite"
    storage_account_type: str = "Standard_LRS"


class AzureStackConfig(BaseModel):
    """Azure VNet and Linux VM configuration."""

    resource_group_name: str = "fdervisi_IaC_basic"
    location: str = "North Europe"
    prevent_resource_group_deletion: bool = False
    vnet_name: str = "vnet_1"
    address_space: list[str] = Field(default_factory=lambda: ["10.0.0.0/16"])
    subnet_name: str = "subnet_1"
    subnet_prefixes: list[str] = Field(default_factory=lambda: ["10.0.0.0/16"])
    nic_name: str = "nic_1"
    vm_name: str = "vm-1"
    vm_size: str = "Standard_DS1_v2"
    admin_username: str = "Fatos"
    admin_password: SecretStr = SecretStr("Zscaler2022")
    disable_password_authentication: bool = False
    os_disk: OsDiskConfig = Field(default_factory=OsDiskConfig)
    image: ImageReference = Field(default_factory=ImageReference)

    @field_validator("address_space", "subnet_prefixes")
    @classmethod
    def validate_prefixes(cls, v: list[str]) -> list[str]:
        """Validate every prefix is CIDR notation."""
        if not v:
            raise ValueError("At least one address prefix is required")
        return [_check_cidr(prefix) for prefix in v]


class StacksConfig(BaseModel):
    """Top-level configuration for both stacks."""

    aws: AwsStackConfig = Field(default_factory=AwsStackConfig)
    azure: AzureStackConfig = Field(default_factory=AzureStackConfig)


def load_config(file_path: Optional[Union[str, Path]] = None) -> StacksConfig:
    """
    Load stack configuration from a YAML file.

    Keys missing from the file keep their defaults. Without a path the
    defaults are returned as-is.

    Args:
        file_path: Path to a YAML document with optional ``aws`` and ``azure`` sections

    Returns:
        StacksConfig

    Raises:
        ValueError: If the document is not a mapping
    """
    if file_path is None:
        return StacksConfig()

    with open(file_path, "r") as file:
        config_data: Optional[Dict] = yaml.safe_load(file)

    if config_data is None:
        return StacksConfig()

    if not isinstance(config_data, dict):
        raise ValueError(f"Configuration in {file_path} must be a mapping")

    return StacksConfig(**config_data)
