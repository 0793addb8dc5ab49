"""Shared domain models for pgcloudops."""

from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from . import constants


@dataclass(frozen=True)
class ConnectionSettings:
    """Connection parameters for one PostgreSQL endpoint."""

    host: str
    port: str
    database: str
    user: str
    password: Optional[str] = None

    def describe(self) -> str:
        return f"{self.host}:{self.port}/{self.database}"

    def libpq_env(self) -> Dict[str, str]:
        """Environment overlay passed to pg_dump/psql; keeps the password out of argv."""
        if self.password is None:
            return {}
        return {"PGPASSWORD": self.password}


@dataclass(frozen=True)
class SyncConfig:
    """Resolved settings for one schema sync run."""

    source: ConnectionSettings
    target: ConnectionSettings
    dump_dir: Path


@dataclass(frozen=True)
class DeployConfig:
    """Resolved settings for the Cloud Run deployment."""

    project_id: str = constants.PROJECT_ID
    region: str = constants.REGION
    service_name: str = constants.SERVICE_NAME
    image: str = constants.IMAGE
    vpc_network: str = constants.VPC_NETWORK
    vpc_subnet: str = constants.VPC_SUBNET
    email_secret: str = constants.EMAIL_SECRET
    password_secret: str = constants.PASSWORD_SECRET
    bucket_prefix: str = constants.BUCKET_PREFIX
    port: int = constants.CONTAINER_PORT
    memory: str = constants.MEMORY
    cpu: str = constants.CPU
    min_instances: int = constants.MIN_INSTANCES
    max_instances: int = constants.MAX_INSTANCES
    timeout: int = constants.REQUEST_TIMEOUT
    env_vars: Dict[str, str] = field(
        default_factory=lambda: {
            "PGADMIN_LISTEN_PORT": str(constants.CONTAINER_PORT),
            "PGADMIN_CONFIG_SERVER_MODE": "True",
            "PGADMIN_CONFIG_MASTER_PASSWORD_REQUIRED": "False",
        }
    )

    @classmethod
    def field_names(cls) -> List[str]:
        return [item.name for item in fields(cls)]

    @property
    def bucket_name(self) -> str:
        return f"{self.bucket_prefix}-{self.project_id}"

    @property
    def bucket_url(self) -> str:
        return f"gs://{self.bucket_name}"


class DeployOperation(Enum):
    """Subcommands accepted by the deploy entry point."""

    SECRETS = ("secrets", "Create secrets in Secret Manager")
    STORAGE = ("storage", "Create GCS bucket for persistent data")
    DEPLOY = ("deploy", "Deploy to Cloud Run")
    IAP = ("iap", "Enable IAP on the service")
    GRANT_ACCESS = (
        "grant-access",
        f"Grant user access (e.g., grant-access {constants.EXAMPLE_USER_EMAIL})",
    )
    URL = ("url", "Get the service URL")
    FULL = ("full", "Run all steps (secrets, storage, deploy, iap, url)")

    def __init__(self, command: str, help_text: str):
        self.command = command
        self.help_text = help_text

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["DeployOperation"]:
        for operation in cls:
            if operation.command == name:
                return operation
        return None

    @classmethod
    def names(cls) -> List[str]:
        return [operation.command for operation in cls]


FULL_SEQUENCE = (
    DeployOperation.SECRETS,
    DeployOperation.STORAGE,
    DeployOperation.DEPLOY,
    DeployOperation.IAP,
    DeployOperation.URL,
)
