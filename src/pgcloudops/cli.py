import logging
import os

import click
from rich.logging import RichHandler

from . import constants
from .deploy import Deployer
from .errors import OpsError
from .services.config_loader import ConfigLoader, resolve_deploy_config
from .sync import SchemaSync

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


def _configure_logging(verbose: bool, log_file):
    logger = logging.getLogger("pgcloudops")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)


@click.command()
@click.option("--with-data", is_flag=True, default=False, help="Dump table data along with the schema.")
@click.option(
    "--env-file",
    required=False,
    type=click.Path(),
    help="Path to a KEY=VALUE file. Defaults to .env in the current directory.",
)
@click.option(
    "--dump-dir",
    required=False,
    type=click.Path(file_okay=False),
    help="Directory for dump files (default: ./dumps).",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def sync_schema(with_data, env_file, dump_dir, verbose, log_file):
    """Sync the schema from production to the local dev database."""
    _configure_logging(verbose, log_file)

    sync = SchemaSync(with_data=with_data, env_file=env_file, dump_dir=dump_dir)
    raise SystemExit(sync.run())


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("command", required=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML file overriding deployment settings. Defaults to {constants.DEPLOY_CONFIG_FILE_NAME} if present.",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def deploy(command, args, config, verbose, log_file):
    """Deploy pgAdmin to Cloud Run behind Identity-Aware Proxy.

    COMMAND is one of secrets, storage, deploy, iap, grant-access, url or full.
    """
    _configure_logging(verbose, log_file)

    try:
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), constants.DEPLOY_CONFIG_FILE_NAME)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        deploy_config = resolve_deploy_config(ConfigLoader().load(resolved_config))
    except OpsError as exc:
        raise click.ClickException(str(exc)) from exc

    deployer = Deployer(config=deploy_config)
    raise SystemExit(deployer.run(command, list(args)))
