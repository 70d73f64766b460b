"""Azure VNet and Linux VM stack using CDKTF."""

from typing import Optional

from cdktf import TerraformStack
from constructs import Construct

# AzureRM Provider imports
from cdktf_cdktf_provider_azurerm.provider import (
    AzurermProvider,
    AzurermProviderFeatures,
    AzurermProviderFeaturesResourceGroup,
)
from cdktf_cdktf_provider_azurerm.resource_group import ResourceGroup
from cdktf_cdktf_provider_azurerm.virtual_network import VirtualNetwork
from cdktf_cdktf_provider_azurerm.subnet import Subnet
from cdktf_cdktf_provider_azurerm.network_interface import (
    NetworkInterface,
    NetworkInterfaceIpConfiguration,
)
from cdktf_cdktf_provider_azurerm.linux_virtual_machine import (
    LinuxVirtualMachine,
    LinuxVirtualMachineOsDisk,
    LinuxVirtualMachineSourceImageReference,
)

from models.config import AzureStackConfig


class FlatAzureStack(TerraformStack):
    """
    Azure stack with a single Linux VM.

    Creates:
    - Resource group
    - Virtual network with one subnet
    - Network interface with a dynamic private address
    - Linux virtual machine
    """

    def __init__(self, scope: Construct, id: str, config: Optional[AzureStackConfig] = None):
        """
        Initialize Azure stack.

        Args:
            scope: CDKTF construct scope
            id: Stack identifier
            config: Stack configuration, defaults to AzureStackConfig()
        """
        super().__init__(scope, id)

        self.config = config or AzureStackConfig()

        AzurermProvider(
            self,
            "AzureRm",
            features=AzurermProviderFeatures(
                resource_group=AzurermProviderFeaturesResourceGroup(
                    prevent_deletion_if_contains_resources=self.config.prevent_resource_group_deletion,
                ),
            ),
        )

        self.rg = self._create_resource_group()
        self.vnet = self._create_virtual_network()
        self.subnet = self._create_subnet()
        self.network_interface = self._create_network_interface()
        self.vm = self._create_vm()

    def _create_resource_group(self) -> ResourceGroup:
        """Create resource group."""
        return ResourceGroup(
            self,
            "rg",
            name=self.config.resource_group_name,
            location=self.config.location,
        )

    def _create_virtual_network(self) -> VirtualNetwork:
        """Create virtual network."""
        return VirtualNetwork(
            self,
            "vnet_1",
            resource_group_name=self.rg.name,
            name=self.config.vnet_name,
            location=self.rg.location,
            address_space=list(self.config.address_space),
        )

    def _create_subnet(self) -> Subnet:
        return Subnet(
            self,
            "subnet",
            address_prefixes=list(self.config.subnet_prefixes),
            resource_group_name=self.rg.name,
            virtual_network_name=self.vnet.name,
            name=self.config.subnet_name,
        )

    def _create_network_interface(self) -> NetworkInterface:
        """Create network interface bound to the subnet."""
        return NetworkInterface(
            self,
            "nic",
            name=self.config.nic_name,
            location=self.rg.location,
            resource_group_name=self.rg.name,
            ip_configuration=[
                NetworkInterfaceIpConfiguration(
                    name="nic_ip",
                    subnet_id=self.subnet.id,
                    private_ip_address_allocation="Dynamic",
                )
            ],
        )

    def _create_vm(self) -> LinuxVirtualMachine:
        """Create Linux virtual machine."""
        return LinuxVirtualMachine(
            self,
            "vm",
            name=self.config.vm_name,
            location=self.rg.location,
            resource_group_name=self.rg.name,
            size=self.config.vm_size,
            network_interface_ids=[self.network_interface.id],
            disable_password_authentication=self.config.disable_password_authentication,
            admin_username=self.config.admin_username,
            admin_password=self.config.admin_password.get_secret_value(),
            os_disk=LinuxVirtualMachineOsDisk(
                caching=self.config.os_disk.caching,
                storage_account_type=self.config.os_disk.storage_account_type,
            ),
            source_image_reference=LinuxVirtualMachineSourceImageReference(
                publisher=self.config.image.publisher,
                offer=self.config.image.offer,
                sku=self.config.image.sku,
                version=self.config.image.version,
            ),
        )
