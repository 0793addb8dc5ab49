import subprocess

import pytest

from pgcloudops.errors import CommandError
from pgcloudops.models import DeployConfig
from pgcloudops.services.iap import IapService
from pgcloudops.services.project import ProjectService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def debug(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


def _service(run_cmd):
    config = DeployConfig()
    return IapService(
        logger=DummyLogger(),
        console=DummyConsole(),
        config=config,
        run_cmd=run_cmd,
        project_service=ProjectService(logger=DummyLogger(), config=config, run_cmd=run_cmd),
    )


def test_enable_turns_on_iap_then_binds_invoker_to_service_agent():
    calls = []

    def fake_run_cmd(cmd, check=True, capture_output=False, **kwargs):
        calls.append(cmd)
        if cmd[:3] == ["gcloud", "projects", "describe"]:
            return subprocess.CompletedProcess(cmd, 0, stdout="42\n", stderr="")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    _service(fake_run_cmd).enable()

    assert calls[0] == [
        "gcloud",
        "beta",
        "run",
        "services",
        "update",
        "pgadmin",
        "--region=us-central1",
        "--iap",
        "--project=ut-dnr-ugs-mappingdb-prod",
    ]
    binding = calls[-1]
    assert binding[:5] == ["gcloud", "run", "services", "add-iam-policy-binding", "pgadmin"]
    assert "--member=serviceAccount:service-42@gcp-sa-iap.iam.gserviceaccount.com" in binding
    assert "--role=roles/run.invoker" in binding


def test_enable_stops_when_update_fails():
    calls = []

    def fake_run_cmd(cmd, check=True, capture_output=False, **kwargs):
        calls.append(cmd)
        if "update" in cmd:
            raise CommandError("Command failed (1): gcloud beta run services update", cmd=cmd, returncode=1)
        return subprocess.CompletedProcess(cmd, 0, stdout="42\n", stderr="")

    with pytest.raises(CommandError):
        _service(fake_run_cmd).enable()

    assert all("add-iam-policy-binding" not in cmd for cmd in calls)


def test_grant_access_binds_accessor_role_to_user():
    calls = []

    def fake_run_cmd(cmd, check=True, capture_output=False, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    _service(fake_run_cmd).grant_access("someone@utah.gov")

    assert calls == [
        [
            "gcloud",
            "beta",
            "iap",
            "web",
            "add-iam-policy-binding",
            "--resource-type=cloud-run",
            "--service=pgadmin",
            "--region=us-central1",
            "--member=user:someone@utah.gov",
            "--role=roles/iap.httpsResourceAccessor",
            "--project=ut-dnr-ugs-mappingdb-prod",
        ]
    ]
