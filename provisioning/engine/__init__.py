"""CDKTF stacks and synthesis engine."""

from .aws_stack import FlatAwsStack
from .azure_stack import FlatAzureStack
from .executor import CDKTFExecutor, SynthResult, build_app, synth_stacks
from .graph import Unit, count_kinds, declared_outputs, declared_units, unit_references, validate_stack

__all__ = [
    "FlatAwsStack",
    "FlatAzureStack",
    "CDKTFExecutor",
    "SynthResult",
    "build_app",
    "synth_stacks",
    "Unit",
    "count_kinds",
    "declared_outputs",
    "declared_units",
    "unit_references",
    "validate_stack",
]
