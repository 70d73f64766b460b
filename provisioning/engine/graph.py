"""Inspection of the declaration graph built inside a stack."""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Set

from cdktf import (
    TerraformDataSource,
    TerraformOutput,
    TerraformProvider,
    TerraformResource,
    TerraformStack,
)


# Terraform type -> unit kind
UNIT_KINDS = {
    "aws_vpc": "network",
    "aws_subnet": "subnet",
    "aws_internet_gateway": "internet-gateway",
    "aws_route_table": "route-table",
    "aws_route_table_association": "route-table-association",
    "aws_route": "route",
    "aws_security_group": "security-group",
    "aws_ami": "compute-image-lookup",
    "aws_instance": "compute-instance",
    "azurerm_resource_group": "resource-group",
    "azurerm_virtual_network": "virtual-network",
    "azurerm_subnet": "subnet",
    "azurerm_network_interface": "network-interface",
    "azurerm_linux_virtual_machine": "virtual-machine",
}

_INTERPOLATION = re.compile(r"\$\{([^}]*)\}")
_ADDRESS = re.compile(r"(?<![\w.])((?:data\.)?[A-Za-z][\w]*\.[A-Za-z_][\w-]*)")


@dataclass(frozen=True)
class Unit:
    """A resource or data source declared in a stack."""

    name: str
    kind: str
    address: str
    position: int


def _address(element: Any) -> str:
    if isinstance(element, TerraformDataSource):
        return f"data.{element.terraform_resource_type}.{element.friendly_unique_id}"
    if isinstance(element, TerraformResource):
        return f"{element.terraform_resource_type}.{element.friendly_unique_id}"
    return f"output.{element.friendly_unique_id}"


def _elements(stack: TerraformStack) -> Iterator[Any]:
    for child in stack.node.children:
        if isinstance(child, (TerraformResource, TerraformDataSource, TerraformOutput)):
            yield child


def declared_units(stack: TerraformStack) -> List[Unit]:
    """
    List resources and data sources in construction order.

    Args:
        stack: Constructed stack

    Returns:
        Units with their position among all declared elements
    """
    units = []
    for position, element in enumerate(_elements(stack)):
        if isinstance(element, TerraformOutput):
            continue
        resource_type = element.terraform_resource_type
        units.append(
            Unit(
                name=element.node.id,
                kind=UNIT_KINDS.get(resource_type, resource_type),
                address=_address(element),
                position=position,
            )
        )
    return units


def declared_outputs(stack: TerraformStack) -> List[str]:
    """Names of the outputs declared in a stack."""
    return [e.node.id for e in _elements(stack) if isinstance(e, TerraformOutput)]


def count_kinds(stack: TerraformStack) -> Counter:
    """Count declared units per kind."""
    return Counter(unit.kind for unit in declared_units(stack))


def _strings(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from _strings(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _strings(item)


def _find_references(config: Any, known_types: Set[str]) -> Set[str]:
    references = set()
    for text in _strings(config):
        for body in _INTERPOLATION.findall(text):
            for candidate in _ADDRESS.findall(body):
                resource_type = candidate.split(".")[-2]
                if resource_type in known_types:
                    references.add(candidate)
    return references


def unit_references(stack: TerraformStack) -> Dict[str, Set[str]]:
    """
    Collect cross-unit references from the stack's Terraform JSON.

    Args:
        stack: Constructed stack

    Returns:
        Mapping of element address to the addresses it references
    """
    tf = stack.to_terraform()
    resources = tf.get("resource", {})
    data = tf.get("data", {})
    outputs = tf.get("output", {})
    known_types = set(resources) | set(data)

    references: Dict[str, Set[str]] = {}
    for resource_type, blocks in resources.items():
        for name, config in blocks.items():
            references[f"{resource_type}.{name}"] = _find_references(config, known_types)
    for resource_type, blocks in data.items():
        for name, config in blocks.items():
            references[f"data.{resource_type}.{name}"] = _find_references(config, known_types)
    for name, config in outputs.items():
        references[f"output.{name}"] = _find_references(config, known_types)

    return references


def _check_providers(stack: TerraformStack) -> None:
    providers: Dict[str, int] = {}
    for child in stack.node.children:
        if isinstance(child, TerraformProvider) and not child.alias:
            vendor = child.terraform_resource_type
            providers[vendor] = providers.get(vendor, 0) + 1

    for vendor, count in sorted(providers.items()):
        if count > 1:
            raise ValueError(
                f"Stack '{stack.node.id}' configures {count} '{vendor}' providers without an alias"
            )


def validate_stack(stack: TerraformStack) -> List[Unit]:
    """
    Check provider configuration and that references only point backwards.

    Unit names need no check here: construct ids are unique per scope and
    constructs raises while the stack is built.

    Args:
        stack: Constructed stack

    Returns:
        Declared units

    Raises:
        ValueError: On a duplicate unaliased provider, an undeclared reference or a forward reference
    """
    _check_providers(stack)

    units = declared_units(stack)
    positions = {_address(e): i for i, e in enumerate(_elements(stack))}

    for source, targets in unit_references(stack).items():
        source_position = positions.get(source)
        if source_position is None:
            continue
        for target in sorted(targets):
            if target not in positions:
                raise ValueError(
                    f"'{source}' references undeclared unit '{target}' in stack '{stack.node.id}'"
                )
            if positions[target] >= source_position:
                raise ValueError(
                    f"'{source}' references '{target}' before it is declared in stack '{stack.node.id}'"
                )

    return units
