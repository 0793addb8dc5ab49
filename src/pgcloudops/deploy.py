import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import click
from rich.console import Console

from . import constants
from .errors import OpsError, UsageError
from .models import FULL_SEQUENCE, DeployConfig, DeployOperation
from .services.cloud_run import CloudRunService
from .services.command_runner import CommandRunner
from .services.iap import IapService
from .services.project import ProjectService
from .services.secret_manager import SecretManagerService
from .services.storage import StorageService

console = Console()
logger = logging.getLogger("pgcloudops")

PROG_NAME = "pgcloudops-deploy"


def build_usage(prog_name: str = PROG_NAME) -> str:
    width = max(len(name) for name in DeployOperation.names())
    lines = [
        f"Usage: {prog_name} {{{'|'.join(DeployOperation.names())}}}",
        "",
        "Commands:",
    ]
    for operation in DeployOperation:
        lines.append(f"  {operation.command.ljust(width)} - {operation.help_text}")
    return "\n".join(lines)


def prompt_admin_credentials() -> Tuple[str, str]:
    email = click.prompt("Enter pgAdmin admin email")
    password = click.prompt("Enter pgAdmin admin password", hide_input=True)
    return email, password


class Deployer:
    """Dispatches deploy subcommands to the Cloud Run provisioning services."""

    def __init__(
        self,
        config: Optional[DeployConfig] = None,
        run_cmd: Optional[Callable] = None,
        prompt_credentials: Optional[Callable[[], Tuple[str, str]]] = None,
    ):
        self.config = config or DeployConfig()
        self.run_cmd = run_cmd or CommandRunner(logger=logger)
        self.prompt_credentials = prompt_credentials or prompt_admin_credentials

        self.project_service = ProjectService(logger=logger, config=self.config, run_cmd=self.run_cmd)
        self.secret_manager_service = SecretManagerService(
            logger=logger,
            console=console,
            config=self.config,
            run_cmd=self.run_cmd,
            project_service=self.project_service,
        )
        self.storage_service = StorageService(
            logger=logger,
            console=console,
            config=self.config,
            run_cmd=self.run_cmd,
            project_service=self.project_service,
        )
        self.cloud_run_service = CloudRunService(
            logger=logger,
            console=console,
            config=self.config,
            run_cmd=self.run_cmd,
        )
        self.iap_service = IapService(
            logger=logger,
            console=console,
            config=self.config,
            run_cmd=self.run_cmd,
            project_service=self.project_service,
        )

        self.handlers: Dict[DeployOperation, Callable[[Sequence[str]], None]] = {
            DeployOperation.SECRETS: self.create_secrets,
            DeployOperation.STORAGE: self.create_storage,
            DeployOperation.DEPLOY: self.deploy,
            DeployOperation.IAP: self.enable_iap,
            DeployOperation.GRANT_ACCESS: self.grant_access,
            DeployOperation.URL: self.get_url,
            DeployOperation.FULL: self.full,
        }
        self.completed: List[DeployOperation] = []

    def print_banner(self):
        console.print("[bold]=== pgAdmin Cloud Run Deployment ===[/bold]")
        console.print(f"Project: {self.config.project_id}")
        console.print(f"Region: {self.config.region}")
        console.print(f"Service: {self.config.service_name}")
        console.print("")

    def create_secrets(self, _args: Sequence[str] = ()):
        email, password = self.prompt_credentials()
        self.secret_manager_service.provision(email, password)

    def create_storage(self, _args: Sequence[str] = ()):
        self.storage_service.provision()

    def deploy(self, _args: Sequence[str] = ()):
        self.cloud_run_service.deploy()

    def enable_iap(self, _args: Sequence[str] = ()):
        self.iap_service.enable()

    @staticmethod
    def _user_email(args: Sequence[str]) -> str:
        user_email = args[0].strip() if args else ""
        if not user_email:
            raise UsageError(
                "Missing user email for grant-access.",
                usage=f"Usage: {PROG_NAME} grant-access {constants.EXAMPLE_USER_EMAIL}",
            )
        return user_email

    def grant_access(self, args: Sequence[str] = ()):
        self.iap_service.grant_access(self._user_email(args))

    def get_url(self, _args: Sequence[str] = ()):
        self.cloud_run_service.get_url()

    def full(self, _args: Sequence[str] = ()):
        for operation in FULL_SEQUENCE:
            logger.info("Running step: %s", operation.command)
            self.handlers[operation](())
            self.completed.append(operation)

    def dispatch(self, command: Optional[str], args: Sequence[str] = ()):
        operation = DeployOperation.from_name(command)
        if operation is None:
            raise UsageError(f"Unknown command: {command or '<none>'}", usage=build_usage())

        if operation is DeployOperation.GRANT_ACCESS:
            self._user_email(args)

        self.print_banner()
        self.handlers[operation](list(args))
        if operation is not DeployOperation.FULL:
            self.completed.append(operation)

    def run(self, command: Optional[str], args: Sequence[str] = ()) -> int:
        try:
            self.dispatch(command, args)
            return 0

        except (KeyboardInterrupt, click.Abort):
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except UsageError as exc:
            console.print(exc.usage, markup=False, highlight=False, soft_wrap=True)
            logger.debug(str(exc))
            return 1
        except OpsError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            if self.completed:
                logger.warning(
                    "Steps already applied are left in place: %s",
                    ", ".join(operation.command for operation in self.completed),
                )
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            return 1
