"""Actionable error catalog for pgcloudops."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_setting": {
        "what": "Set {key} in .env.",
        "next": "Add `{key}=...` to the .env file or export it before running.",
    },
    "command_not_found": {
        "what": "Required command not found: {command}.",
        "next": "Install it and make sure it is on your PATH.",
    },
    "dump_failed": {
        "what": "pg_dump failed against {host}:{port}/{database}.",
        "next": "Check the PROD_POSTGRES_* settings and that the production host is reachable.",
    },
    "apply_failed": {
        "what": "psql failed while applying {dump_file}.",
        "next": "Check that the local database is running and POSTGRES_* settings are correct.",
    },
    "provisioning_failed": {
        "what": "Could not create {resource}.",
        "next": "Verify your gcloud credentials and permissions on project {project_id}.",
    },
    "project_lookup_failed": {
        "what": "Could not determine the project number for {project_id}.",
        "next": "Run `gcloud auth login` and check that the project exists.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
