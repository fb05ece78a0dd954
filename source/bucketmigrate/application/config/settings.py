"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from bucketmigrate.application.util.exceptions import ConfigurationError

CHUNK_SIZE = 5 * 1024 * 1024
MAX_KEYS = 1_000_000
DEFAULT_REGION = "us-east-1"
DEFAULT_PROFILE = "default"
DEFAULT_MAX_ATTEMPTS = 1000
DEFAULT_PART_WORKERS = 8

SOURCE_PREFIX = "OLD"
DESTINATION_PREFIX = "NEW"


class ErrorPolicy(Enum):
    CONTINUE = "continue"
    HALT = "halt"


@dataclass(frozen=True)
class EndpointSettings:
    role: str
    region: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None
    credentials_file: Optional[str] = None
    profile: str = DEFAULT_PROFILE
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_pool_connections: int = DEFAULT_PART_WORKERS

    def __post_init__(self) -> None:
        if not self.region.strip():
            raise ConfigurationError(f"Region for the {self.role} endpoint is empty")
        if self.max_attempts < 1:
            raise ConfigurationError(
                f"Retry attempts for the {self.role} endpoint must be positive"
            )

    @classmethod
    def from_env(
        cls,
        prefix: str,
        role: str,
        env: Optional[Mapping[str, str]] = None,
        max_pool_connections: int = DEFAULT_PART_WORKERS,
    ) -> "EndpointSettings":
        env = os.environ if env is None else env
        return cls(
            role=role,
            region=env.get(f"{prefix}_AWS_REGION", DEFAULT_REGION),
            endpoint_url=env.get(f"{prefix}_AWS_ENDPOINT_URL") or None,
            credentials_file=env.get(
                f"{prefix}_AWS_CREDENTIALS_FILE", f".{prefix.lower()}.credentials"
            ),
            profile=env.get(f"{prefix}_AWS_PROFILE", DEFAULT_PROFILE),
            max_attempts=_get_int(env, "STORAGE_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            max_pool_connections=max_pool_connections,
        )


@dataclass(frozen=True)
class MigrationSettings:
    source: EndpointSettings
    destination: EndpointSettings
    bucket_suffix: Optional[str] = None
    chunk_size: int = CHUNK_SIZE
    max_keys: int = MAX_KEYS
    max_part_workers: int = DEFAULT_PART_WORKERS
    object_error_policy: ErrorPolicy = ErrorPolicy.CONTINUE
    bucket_error_policy: ErrorPolicy = ErrorPolicy.HALT

    def __post_init__(self) -> None:
        if self.max_part_workers < 1:
            raise ConfigurationError("MAX_PART_WORKERS must be positive")
        if self.chunk_size < 1:
            raise ConfigurationError("Chunk size must be positive")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "MigrationSettings":
        env = os.environ if env is None else env
        workers = _get_int(env, "MAX_PART_WORKERS", DEFAULT_PART_WORKERS)
        return cls(
            source=EndpointSettings.from_env(SOURCE_PREFIX, "source", env, workers),
            destination=EndpointSettings.from_env(
                DESTINATION_PREFIX, "destination", env, workers
            ),
            bucket_suffix=env.get("NEW_BUCKET_SUFFIX") or None,
            max_part_workers=workers,
            object_error_policy=_get_policy(
                env, "OBJECT_ERROR_POLICY", ErrorPolicy.CONTINUE
            ),
            bucket_error_policy=_get_policy(env, "BUCKET_ERROR_POLICY", ErrorPolicy.HALT),
        )


@dataclass(frozen=True)
class SweepSettings:
    target: EndpointSettings
    abort_incomplete_uploads: bool = True

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SweepSettings":
        env = os.environ if env is None else env
        return cls(
            target=EndpointSettings.from_env(SOURCE_PREFIX, "sweep", env),
            abort_incomplete_uploads=_get_bool(env, "SWEEP_ABORT_UPLOADS", True),
        )


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got: {value}")


def _get_policy(env: Mapping[str, str], name: str, default: ErrorPolicy) -> ErrorPolicy:
    value = env.get(name)
    if not value:
        return default
    try:
        return ErrorPolicy(value.lower())
    except ValueError:
        allowed = ", ".join(policy.value for policy in ErrorPolicy)
        raise ConfigurationError(f"{name} must be one of: {allowed}, got: {value}")


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if not value:
        return default
    if value.lower() in ("1", "true", "yes", "on"):
        return True
    if value.lower() in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got: {value}")
