"""CDKTF executor for synthesizing the stacks."""

import json
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional

from cdktf import App, TerraformStack
import structlog

from models.config import StacksConfig
from .aws_stack import FlatAwsStack
from .azure_stack import FlatAzureStack
from .graph import validate_stack


logger = structlog.get_logger()

AWS_STACK_ID = "AwsStack"
AZURE_STACK_ID = "AzureStack"


@dataclass
class SynthResult:
    """Result of a synthesis run."""

    outdir: Path
    manifests: Dict[str, Path] = field(default_factory=dict)
    units: Dict[str, int] = field(default_factory=dict)


def build_app(
    outdir: Optional[Path] = None,
    config: Optional[StacksConfig] = None,
    aws_stack_id: str = AWS_STACK_ID,
    azure_stack_id: str = AZURE_STACK_ID,
) -> App:
    """
    Create the CDKTF app with both stacks.

    Args:
        outdir: Synthesis output directory, CDKTF default when None
        config: Stack configuration, defaults to StacksConfig()
        aws_stack_id: Identifier of the AWS stack
        azure_stack_id: Identifier of the Azure stack

    Returns:
        App holding the AWS stack followed by the Azure stack
    """
    config = config or StacksConfig()

    app = App(outdir=str(outdir)) if outdir is not None else App()

    FlatAwsStack(app, aws_stack_id, config.aws)
    FlatAzureStack(app, azure_stack_id, config.azure)

    return app


class CDKTFExecutor:
    """Executor for CDKTF operations."""

    def __init__(self, workdir: Path):
        """
        Initialize CDKTF executor.

        The cdktf CLI passes its output directory in CDKTF_OUTDIR, which
        takes precedence over <workdir>/cdktf.out.

        Args:
            workdir: Working directory for CDKTF operations
        """
        self.workdir = Path(workdir)
        self.workdir.mkdir(parents=True, exist_ok=True)

        cli_outdir = os.environ.get("CDKTF_OUTDIR")
        self.outdir = Path(cli_outdir) if cli_outdir else self.workdir / "cdktf.out"

    def synth(
        self,
        config: Optional[StacksConfig] = None,
        aws_stack_id: str = AWS_STACK_ID,
        azure_stack_id: str = AZURE_STACK_ID,
    ) -> SynthResult:
        """
        Synthesize both stacks to Terraform JSON.

        Args:
            config: Stack configuration
            aws_stack_id: Identifier of the AWS stack
            azure_stack_id: Identifier of the Azure stack

        Returns:
            SynthResult with one manifest path per stack

        Raises:
            Exception: If construction, validation or synthesis fails
        """
        try:
            app = build_app(self.outdir, config, aws_stack_id, azure_stack_id)

            result = SynthResult(outdir=self.outdir)
            for stack in app.node.children:
                if not isinstance(stack, TerraformStack):
                    continue
                stack_id = stack.node.id
                units = validate_stack(stack)
                result.units[stack_id] = len(units)
                result.manifests[stack_id] = self.manifest_path(stack_id)

            app.synth()

        except Exception as e:
            logger.error("Synthesis failed", outdir=str(self.outdir), error=str(e))
            raise

        for stack_id, path in result.manifests.items():
            logger.info(
                "Synthesized stack",
                stack=stack_id,
                units=result.units[stack_id],
                manifest=str(path),
            )

        return result

    def manifest_path(self, stack_id: str) -> Path:
        """Path of the Terraform JSON written for a stack."""
        return self.outdir / "stacks" / stack_id / "cdk.tf.json"

    def read_manifest(self, stack_id: str) -> Dict[str, Any]:
        """
        Load a synthesized stack manifest.

        Args:
            stack_id: Stack identifier

        Returns:
            Parsed Terraform JSON

        Raises:
            FileNotFoundError: If the stack has not been synthesized
        """
        path = self.manifest_path(stack_id)
        if not path.exists():
            raise FileNotFoundError(f"No manifest for stack '{stack_id}' at {path}")

        with open(path, "r") as f:
            return json.load(f)

    def cleanup(self) -> None:
        """Remove working directory."""
        if self.workdir.exists():
            shutil.rmtree(self.workdir)
            logger.info("Cleaned up working directory", workdir=str(self.workdir))


def synth_stacks(workdir: Path, config: Optional[StacksConfig] = None) -> SynthResult:
    """
    Synthesize both stacks into a working directory.

    Args:
        workdir: Working directory
        config: Stack configuration

    Returns:
        SynthResult
    """
    executor = CDKTFExecutor(workdir)
    return executor.synth(config)
