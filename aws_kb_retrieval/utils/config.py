"""Configuration and environment variable management."""

import json
import os
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError
from .logger import get_logger

logger = get_logger()

DEFAULT_REGION = "us-east-1"


class StaticCredentials(BaseModel):
    """Explicit AWS credentials taken from the environment."""

    model_config = ConfigDict(frozen=True)

    access_key_id: str
    secret_access_key: str = Field(repr=False)
    session_token: Optional[str] = Field(default=None, repr=False)


class Config(BaseModel):
    """
    Application configuration resolved once at startup.

    When ``credentials`` is None the Bedrock client falls back to the
    boto3 default credential chain (SSO, shared profiles, instance roles).
    """

    model_config = ConfigDict(frozen=True)

    aws_region: str = DEFAULT_REGION
    credentials: Optional[StaticCredentials] = Field(default=None, repr=False)
    knowledge_base_ids: Tuple[str, ...] = ()
    retry_attempts: int = 1

    @property
    def default_knowledge_base_id(self) -> Optional[str]:
        """First configured knowledge base ID, if any."""
        return self.knowledge_base_ids[0] if self.knowledge_base_ids else None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build configuration from environment variables.

        Args:
            environ: Optional mapping to read instead of os.environ

        Returns:
            Immutable Config instance

        Raises:
            ConfigurationError: If AWS_KB_IDS or KB_RETRY_ATTEMPTS is malformed
        """
        env = os.environ if environ is None else environ

        config = cls(
            aws_region=_get_aws_region(env),
            credentials=_get_static_credentials(env),
            knowledge_base_ids=_parse_knowledge_base_ids(_get_env_var(env, "AWS_KB_IDS")),
            retry_attempts=_parse_retry_attempts(_get_env_var(env, "KB_RETRY_ATTEMPTS")),
        )

        logger.debug(
            "Configuration resolved",
            extra={
                "aws_region": config.aws_region,
                "static_credentials": config.credentials is not None,
                "knowledge_base_ids": list(config.knowledge_base_ids),
                "retry_attempts": config.retry_attempts,
            },
        )
        return config


def _get_env_var(env: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable with optional default. Empty values count as unset."""
    return env.get(name) or default


def _get_aws_region(env: Mapping[str, str]) -> str:
    """
    Get AWS region from environment or boto3 session.

    Returns:
        AWS region string
    """
    region = _get_env_var(env, "AWS_REGION") or _get_env_var(env, "AWS_DEFAULT_REGION")

    if region:
        return region

    try:
        import boto3
        session = boto3.Session()
        return session.region_name or DEFAULT_REGION
    except Exception:
        logger.warning(f"Could not determine region from boto3 session, using {DEFAULT_REGION}")
        return DEFAULT_REGION


def _get_static_credentials(env: Mapping[str, str]) -> Optional[StaticCredentials]:
    """Explicit keys take priority; otherwise defer to the ambient chain."""
    access_key = _get_env_var(env, "AWS_ACCESS_KEY_ID")
    secret_key = _get_env_var(env, "AWS_SECRET_ACCESS_KEY")

    if access_key and secret_key:
        return StaticCredentials(
            access_key_id=access_key,
            secret_access_key=secret_key,
            session_token=_get_env_var(env, "AWS_SESSION_TOKEN"),
        )

    if access_key or secret_key:
        logger.warning(
            "Only one of AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY is set; "
            "ignoring it and using the default credential provider chain"
        )
    return None


def _parse_knowledge_base_ids(raw: Optional[str]) -> Tuple[str, ...]:
    """
    Parse the AWS_KB_IDS JSON array.

    Raises:
        ConfigurationError: If the value is not a JSON array of non-empty strings
    """
    if raw is None:
        return ()

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"AWS_KB_IDS must be a JSON array of strings: {e}", {"value": raw}
        )

    if not isinstance(parsed, list) or not all(isinstance(kb, str) and kb for kb in parsed):
        raise ConfigurationError(
            "AWS_KB_IDS must be a JSON array of non-empty strings", {"value": raw}
        )

    return tuple(parsed)


def _parse_retry_attempts(raw: Optional[str]) -> int:
    if raw is None:
        return 1

    try:
        attempts = int(raw)
    except ValueError:
        attempts = 0

    if attempts < 1:
        raise ConfigurationError(
            "KB_RETRY_ATTEMPTS must be a positive integer", {"value": raw}
        )
    return attempts
