"""Identity-Aware Proxy gate for the deployed service."""

from typing import Callable, List

from pgcloudops import constants
from pgcloudops.models import DeployConfig
from pgcloudops.services.project import ProjectService


class IapService:
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

    def build_enable_command(self) -> List[str]:
        return [
            "gcloud",
            "beta",
            "run",
            "services",
            "update",
            self.config.service_name,
            f"--region={self.config.region}",
            "--iap",
            f"--project={self.config.project_id}",
        ]

    def build_invoker_binding_command(self) -> List[str]:
        return [
            "gcloud",
            "run",
            "services",
            "add-iam-policy-binding",
            self.config.service_name,
            f"--region={self.config.region}",
            f"--member={self.project_service.iap_service_agent()}",
            f"--role={constants.RUN_INVOKER_ROLE}",
            f"--project={self.config.project_id}",
        ]

    def build_grant_access_command(self, user_email: str) -> List[str]:
        return [
            "gcloud",
            "beta",
            "iap",
            "web",
            "add-iam-policy-binding",
            "--resource-type=cloud-run",
            f"--service={self.config.service_name}",
            f"--region={self.config.region}",
            f"--member=user:{user_email}",
            f"--role={constants.IAP_ACCESSOR_ROLE}",
            f"--project={self.config.project_id}",
        ]

    def enable(self):
        self.console.print("[blue]Enabling IAP on Cloud Run service...[/blue]")

        self.run_cmd(self.build_enable_command(), check=True)
        # The IAP service agent must be able to invoke the service it fronts.
        self.run_cmd(self.build_invoker_binding_command(), check=True)

        self.console.print("[green]IAP enabled![/green]")

    def grant_access(self, user_email: str):
        self.console.print(f"[blue]Granting IAP access to {user_email}...[/blue]")
        self.logger.info("Granting %s on %s to %s", constants.IAP_ACCESSOR_ROLE, self.config.service_name, user_email)

        self.run_cmd(self.build_grant_access_command(user_email), check=True)

        self.console.print(f"[green]Access granted to {user_email}[/green]")
