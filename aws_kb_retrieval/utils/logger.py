"""Logging utilities using AWS Lambda Powertools."""

import logging
import sys

from aws_lambda_powertools import Logger

SERVICE_NAME = "aws-kb-retrieval"


def get_logger() -> Logger:
    """
    Get a configured logger instance.

    The level comes from POWERTOOLS_LOG_LEVEL or LOG_LEVEL, defaulting to
    INFO. Output goes to stderr; stdout carries the MCP message stream.

    Returns:
        Configured Logger instance
    """
    return Logger(
        service=SERVICE_NAME,
        logger_handler=logging.StreamHandler(sys.stderr),
    )
