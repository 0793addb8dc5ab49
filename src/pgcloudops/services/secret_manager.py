"""Secret Manager provisioning for the pgAdmin deployment."""

from typing import Callable, List

from pgcloudops import constants
from pgcloudops.models import DeployConfig
from pgcloudops.services.project import ProjectService, is_already_exists, raise_for_create


class SecretManagerService:
    """Creates the pgAdmin credential secrets and grants the runtime access to them."""

    def __init__(
        self,
        logger,
        console,
        config: DeployConfig,
        run_cmd: Callable,
        project_service: ProjectService,
    ):
        self.logger = logger
        self.console = console
        self.config = config
        self.run_cmd = run_cmd
        self.project_service = project_service

    def build_create_command(self, secret_name: str) -> List[str]:
        # Regional replication keeps the secret inside the org's location policy.
        return [
            "gcloud",
            "secrets",
            "create",
            secret_name,
            "--data-file=-",
            "--replication-policy=user-managed",
            f"--locations={self.config.region}",
            f"--project={self.config.project_id}",
        ]

    def build_access_binding_command(self, secret_name: str) -> List[str]:
        return [
            "gcloud",
            "secrets",
            "add-iam-policy-binding",
            secret_name,
            f"--member={self.project_service.compute_service_account()}",
            f"--role={constants.SECRET_ACCESSOR_ROLE}",
            f"--project={self.config.project_id}",
        ]

    def create_secret(self, secret_name: str, value: str) -> bool:
        """Returns False when the secret already existed."""
        cmd = self.build_create_command(secret_name)
        result = self.run_cmd(cmd, check=False, capture_output=True, input_text=value)

        if result.returncode == 0:
            self.logger.info("Created secret %s", secret_name)
            return True

        if is_already_exists(result):
            self.console.print(f"[yellow]Secret {secret_name} already exists[/yellow]")
            self.logger.info("Secret %s already exists", secret_name)
            return False

        raise_for_create(result, cmd, f"secret {secret_name}", self.config.project_id)

    def grant_runtime_access(self, secret_name: str):
        self.run_cmd(self.build_access_binding_command(secret_name), check=True)

    def provision(self, admin_email: str, admin_password: str):
        self.console.print("[blue]Creating secrets in Secret Manager...[/blue]")

        self.create_secret(self.config.email_secret, admin_email)
        self.create_secret(self.config.password_secret, admin_password)

        for secret_name in (self.config.email_secret, self.config.password_secret):
            self.grant_runtime_access(secret_name)

        self.console.print("[green]Secrets created successfully![/green]")
