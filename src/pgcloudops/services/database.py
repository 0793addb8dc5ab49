"""PostgreSQL dump/apply services for pgcloudops."""

import os
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from pgcloudops import constants
from pgcloudops.errors import CommandError, OpsError
from pgcloudops.errors_catalog import actionable_error
from pgcloudops.models import ConnectionSettings


class DatabaseService:
    """Builds and runs the pg_dump and psql invocations of a schema sync."""

    def __init__(self, logger, console, run_cmd: Callable):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd

    @staticmethod
    def build_dump_path(dump_dir: Path, now: Optional[datetime] = None) -> Path:
        timestamp = (now or datetime.now()).strftime(constants.DUMP_TIMESTAMP_FORMAT)
        return Path(dump_dir) / f"schema_{timestamp}.sql"

    @staticmethod
    def _connection_args(settings: ConnectionSettings) -> List[str]:
        return [
            "-h",
            settings.host,
            "-p",
            settings.port,
            "-U",
            settings.user,
            "-d",
            settings.database,
        ]

    def build_dump_command(
        self, source: ConnectionSettings, dump_path: Path, with_data: bool = False
    ) -> List[str]:
        cmd = ["pg_dump"] + self._connection_args(source)
        if not with_data:
            cmd.append("--schema-only")
        cmd += ["--clean", "--if-exists", "-f", str(dump_path)]
        return cmd

    def build_apply_command(self, target: ConnectionSettings, dump_path: Path) -> List[str]:
        return ["psql"] + self._connection_args(target) + ["-f", str(dump_path)]

    def prepare_dump_dir(self, dump_dir: Path):
        try:
            os.makedirs(dump_dir, exist_ok=True)
        except OSError as exc:
            raise OpsError(f"Could not create dump directory {dump_dir}: {exc}") from exc

    def dump_schema(self, source: ConnectionSettings, dump_path: Path, with_data: bool = False):
        self.console.print(
            f"[blue]==> Dumping schema from production ({source.describe()})...[/blue]"
        )
        if with_data:
            self.console.print("[yellow]    Including data (this may take a while)...[/yellow]")
        self.logger.info("Dumping %s to %s (with_data=%s)", source.describe(), dump_path, with_data)

        cmd = self.build_dump_command(source, dump_path, with_data=with_data)
        try:
            self.run_cmd(cmd, check=True, env=source.libpq_env())
        except CommandError as exc:
            raise CommandError(
                f"{actionable_error('dump_failed', host=source.host, port=source.port, database=source.database)}\n{exc}",
                cmd=exc.cmd,
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc

        self.console.print(f"[green]==> Schema dumped to {dump_path}[/green]")

    def apply_schema(self, target: ConnectionSettings, dump_path: Path):
        self.console.print(
            f"[blue]==> Applying schema to local dev ({target.describe()})...[/blue]"
        )
        self.logger.info("Applying %s to %s", dump_path, target.describe())

        cmd = self.build_apply_command(target, dump_path)
        try:
            self.run_cmd(cmd, check=True, env=target.libpq_env())
        except CommandError as exc:
            raise CommandError(
                f"{actionable_error('apply_failed', dump_file=str(dump_path))}\n{exc}",
                cmd=exc.cmd,
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc
