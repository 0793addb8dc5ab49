"""Cloud Storage provisioning for pgAdmin's persistent data."""

from typing import Callable, List

from pgcloudops import constants
from pgcloudops.models import DeployConfig
from pgcloudops.services.project import ProjectService, is_already_exists, raise_for_create


class StorageService:
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

    def build_create_command(self) -> List[str]:
        return [
            "gcloud",
            "storage",
            "buckets",
            "create",
            self.config.bucket_url,
            f"--location={self.config.region}",
            f"--project={self.config.project_id}",
        ]

    def build_access_binding_command(self) -> List[str]:
        return [
            "gcloud",
            "storage",
            "buckets",
            "add-iam-policy-binding",
            self.config.bucket_url,
            f"--member={self.project_service.compute_service_account()}",
            f"--role={constants.STORAGE_OBJECT_ADMIN_ROLE}",
        ]

    def create_bucket(self) -> bool:
        cmd = self.build_create_command()
        result = self.run_cmd(cmd, check=False, capture_output=True)

        if result.returncode == 0:
            self.logger.info("Created bucket %s", self.config.bucket_url)
            return True

        if is_already_exists(result):
            self.console.print("[yellow]Bucket already exists[/yellow]")
            self.logger.info("Bucket %s already exists", self.config.bucket_url)
            return False

        raise_for_create(result, cmd, f"bucket {self.config.bucket_url}", self.config.project_id)

    def provision(self):
        self.console.print("[blue]Creating GCS bucket for pgAdmin data...[/blue]")

        self.create_bucket()
        self.run_cmd(self.build_access_binding_command(), check=True)

        self.console.print(f"[green]Storage bucket created: {self.config.bucket_url}[/green]")
