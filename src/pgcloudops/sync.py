import logging
import os
from pathlib import Path
from typing import Callable, Mapping, Optional

from rich.console import Console

from . import constants
from .errors import OpsError
from .models import SyncConfig
from .services.command_runner import CommandRunner
from .services.config_loader import EnvFileLoader, resolve_sync_config
from .services.database import DatabaseService

console = Console()
logger = logging.getLogger("pgcloudops")


class SchemaSync:
    """Copies the production schema (optionally with data) into the local dev database."""

    def __init__(
        self,
        with_data: bool = False,
        project_dir: Optional[str] = None,
        env_file: Optional[str] = None,
        dump_dir: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        run_cmd: Optional[Callable] = None,
    ):
        self.with_data = with_data
        self.project_dir = Path(project_dir or os.getcwd())
        self.env_file = env_file or str(self.project_dir / constants.ENV_FILE_NAME)
        self.dump_dir = Path(dump_dir) if dump_dir else self.project_dir / constants.DUMP_DIR_NAME
        self.environ = os.environ if environ is None else environ

        self.env_file_loader = EnvFileLoader()
        self.run_cmd = run_cmd or CommandRunner(logger=logger)
        self.database_service = DatabaseService(logger=logger, console=console, run_cmd=self.run_cmd)

        self.config: Optional[SyncConfig] = None
        self.dump_path: Optional[Path] = None

    def resolve_config(self) -> SyncConfig:
        env_file_values = self.env_file_loader.load(self.env_file)
        if env_file_values:
            logger.debug("Loaded %s setting(s) from %s", len(env_file_values), self.env_file)
        return resolve_sync_config(env_file_values, self.environ, self.dump_dir)

    def run(self) -> int:
        try:
            self.config = self.resolve_config()

            self.database_service.prepare_dump_dir(self.config.dump_dir)
            self.dump_path = self.database_service.build_dump_path(self.config.dump_dir)

            self.database_service.dump_schema(
                self.config.source, self.dump_path, with_data=self.with_data
            )
            self.database_service.apply_schema(self.config.target, self.dump_path)

            console.print("[bold green]==> Done! Local dev schema synced from production.[/bold green]")
            console.print(f"    Dump saved at: {self.dump_path}")
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except OpsError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            return 1
