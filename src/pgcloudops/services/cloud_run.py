"""Cloud Run deployment and lookup services."""

from typing import Callable, List

from pgcloudops import constants
from pgcloudops.models import DeployConfig


class CloudRunService:
    """Deploys the pgAdmin image and reads back the service endpoint."""

    def __init__(self, logger, console, config: DeployConfig, run_cmd: Callable):
        self.logger = logger
        self.console = console
        self.config = config
        self.run_cmd = run_cmd

    def _secret_mapping(self) -> str:
        return ",".join(
            [
                f"PGADMIN_DEFAULT_EMAIL={self.config.email_secret}:latest",
                f"PGADMIN_DEFAULT_PASSWORD={self.config.password_secret}:latest",
            ]
        )

    def _env_vars(self) -> str:
        return ",".join(f"{key}={value}" for key, value in self.config.env_vars.items())

    def build_deploy_command(self) -> List[str]:
        config = self.config
        return [
            "gcloud",
            "run",
            "deploy",
            config.service_name,
            f"--image={config.image}",
            f"--region={config.region}",
            "--platform=managed",
            f"--network={config.vpc_network}",
            f"--subnet={config.vpc_subnet}",
            "--vpc-egress=all-traffic",
            f"--set-secrets={self._secret_mapping()}",
            f"--set-env-vars={self._env_vars()}",
            f"--add-volume=name={constants.VOLUME_NAME},type=cloud-storage,bucket={config.bucket_name}",
            f"--add-volume-mount=volume={constants.VOLUME_NAME},mount-path={constants.VOLUME_MOUNT_PATH}",
            f"--port={config.port}",
            f"--memory={config.memory}",
            f"--cpu={config.cpu}",
            f"--min-instances={config.min_instances}",
            f"--max-instances={config.max_instances}",
            f"--timeout={config.timeout}",
            f"--execution-environment={constants.EXECUTION_ENVIRONMENT}",
            f"--project={config.project_id}",
        ]

    def build_describe_url_command(self) -> List[str]:
        return [
            "gcloud",
            "run",
            "services",
            "describe",
            self.config.service_name,
            f"--region={self.config.region}",
            f"--project={self.config.project_id}",
            "--format=value(status.url)",
        ]

    def deploy(self):
        self.console.print("[blue]Deploying pgAdmin to Cloud Run...[/blue]")
        self.logger.info("Deploying %s (%s)", self.config.service_name, self.config.image)

        self.run_cmd(self.build_deploy_command(), check=True)

        self.console.print("[green]Deployment complete![/green]")

    def get_url(self) -> str:
        result = self.run_cmd(self.build_describe_url_command(), check=True, capture_output=True)
        url = (result.stdout or "").strip()
        self.console.print(f"Service URL: {url}")
        return url
