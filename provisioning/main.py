#!/usr/bin/env python
"""CDKTF app entry point for the AWS and Azure stacks."""

from pathlib import Path

import structlog

from engine.executor import CDKTFExecutor
from models.config import load_config
from runtime.config import settings
from runtime.logs import setup_logging


setup_logging(settings.log_level)
logger = structlog.get_logger()


def main() -> None:
    config = load_config(settings.config_file)

    logger.info(
        "Starting synthesis",
        workdir=settings.workdir,
        config_file=settings.config_file,
    )

    executor = CDKTFExecutor(Path(settings.workdir))
    executor.synth(
        config,
        aws_stack_id=settings.aws_stack_id,
        azure_stack_id=settings.azure_stack_id,
    )


if __name__ == "__main__":
    main()
