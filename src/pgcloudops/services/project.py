"""Cloud project lookups shared by the deployment services."""

import re
import subprocess
from typing import Callable, Optional

from pgcloudops.errors import CommandError, OpsError
from pgcloudops.errors_catalog import actionable_error
from pgcloudops.models import DeployConfig

_ALREADY_EXISTS_PATTERNS = (
    re.compile(r"already exists", re.IGNORECASE),
    re.compile(r"ALREADY_EXISTS"),
    re.compile(r"already own it", re.IGNORECASE),
)


def is_already_exists(result: subprocess.CompletedProcess) -> bool:
    """True when a failed create call reports that the resource is already there."""
    if result.returncode == 0:
        return False
    output = f"{result.stderr or ''}\n{result.stdout or ''}"
    return any(pattern.search(output) for pattern in _ALREADY_EXISTS_PATTERNS)


def raise_for_create(result: subprocess.CompletedProcess, cmd, resource: str, project_id: str):
    stderr = (result.stderr or "").strip()
    message = (
        f"{actionable_error('provisioning_failed', resource=resource, project_id=project_id)}\n"
        f"Command failed ({result.returncode}): {' '.join(cmd)}"
    )
    if stderr:
        message = f"{message}\n{stderr}"
    raise CommandError(message, cmd=list(cmd), returncode=result.returncode, stderr=stderr)


class ProjectService:
    """Resolves the project number used to build service-agent identities."""

    def __init__(self, logger, config: DeployConfig, run_cmd: Callable):
        self.logger = logger
        self.config = config
        self.run_cmd = run_cmd
        self._project_number: Optional[str] = None

    def project_number(self) -> str:
        if self._project_number is not None:
            return self._project_number

        cmd = [
            "gcloud",
            "projects",
            "describe",
            self.config.project_id,
            "--format=value(projectNumber)",
        ]
        try:
            result = self.run_cmd(cmd, check=True, capture_output=True)
        except CommandError as exc:
            raise OpsError(
                f"{actionable_error('project_lookup_failed', project_id=self.config.project_id)}\n{exc}"
            ) from exc

        number = (result.stdout or "").strip()
        if not number:
            raise OpsError(
                actionable_error("project_lookup_failed", project_id=self.config.project_id)
            )

        self.logger.debug("Project %s has number %s", self.config.project_id, number)
        self._project_number = number
        return number

    def compute_service_account(self) -> str:
        return f"serviceAccount:{self.project_number()}-compute@developer.gserviceaccount.com"

    def iap_service_agent(self) -> str:
        return f"serviceAccount:service-{self.project_number()}@gcp-sa-iap.iam.gserviceaccount.com"
