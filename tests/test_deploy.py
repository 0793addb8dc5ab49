import subprocess

import click
import pytest

from pgcloudops.deploy import Deployer, build_usage
from pgcloudops.errors import CommandError
from pgcloudops.models import DeployOperation


class FakeGcloud:
    """Records gcloud invocations; ``failures`` maps an argv prefix to (returncode, stderr)."""

    def __init__(self, failures=None):
        self.calls = []
        self.failures = failures or {}

    def __call__(self, cmd, check=True, capture_output=False, **kwargs):
        self.calls.append(cmd)
        for prefix, (returncode, stderr) in self.failures.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                result = subprocess.CompletedProcess(cmd, returncode, stdout="", stderr=stderr)
                if check:
                    raise CommandError(stderr, cmd=cmd, returncode=returncode, stderr=stderr)
                return result
        if cmd[:3] == ["gcloud", "projects", "describe"]:
            return subprocess.CompletedProcess(cmd, 0, stdout="42\n", stderr="")
        if cmd[:4] == ["gcloud", "run", "services", "describe"]:
            return subprocess.CompletedProcess(cmd, 0, stdout="https://pgadmin.run.app\n", stderr="")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    def invoked(self, *prefix):
        return any(tuple(cmd[: len(prefix)]) == prefix for cmd in self.calls)


def _credentials():
    return "admin@utah.gov", "s3cret"


def _deployer(runner):
    return Deployer(run_cmd=runner, prompt_credentials=_credentials)


def test_usage_lists_every_subcommand():
    usage = build_usage()

    for name in ["secrets", "storage", "deploy", "iap", "grant-access", "url", "full"]:
        assert name in usage
    assert usage.startswith("Usage: pgcloudops-deploy {secrets|storage|deploy|iap|grant-access|url|full}")


@pytest.mark.parametrize("command", [None, "", "destroy"])
def test_unknown_or_missing_command_prints_usage_and_fails(command, capsys):
    runner = FakeGcloud()

    assert _deployer(runner).run(command, []) == 1

    out = capsys.readouterr().out
    assert "Usage: pgcloudops-deploy" in out
    for name in DeployOperation.names():
        assert name in out
    assert runner.calls == []


def test_grant_access_without_email_is_a_usage_error(capsys):
    runner = FakeGcloud()

    assert _deployer(runner).run("grant-access", []) == 1

    out = capsys.readouterr().out
    assert "Usage: pgcloudops-deploy grant-access user@utah.gov" in out
    assert "Project:" not in out
    assert not runner.invoked("gcloud", "beta", "iap")


def test_grant_access_with_email_binds_user():
    runner = FakeGcloud()

    assert _deployer(runner).run("grant-access", ["someone@utah.gov"]) == 0
    assert runner.invoked("gcloud", "beta", "iap", "web", "add-iam-policy-binding")
    assert "--member=user:someone@utah.gov" in runner.calls[-1]


def test_full_runs_steps_in_order():
    runner = FakeGcloud()
    deployer = _deployer(runner)

    assert deployer.run("full", []) == 0

    assert deployer.completed == [
        DeployOperation.SECRETS,
        DeployOperation.STORAGE,
        DeployOperation.DEPLOY,
        DeployOperation.IAP,
        DeployOperation.URL,
    ]
    steps = [cmd[1:4] for cmd in runner.calls if cmd[1] != "projects"]
    first_index = {}
    for index, step in enumerate(steps):
        first_index.setdefault(tuple(step), index)
    assert (
        first_index[("secrets", "create", "pgadmin-email")]
        < first_index[("storage", "buckets", "create")]
        < first_index[("run", "deploy", "pgadmin")]
        < first_index[("beta", "run", "services")]
        < first_index[("run", "services", "describe")]
    )


def test_full_stops_after_storage_failure():
    runner = FakeGcloud(
        failures={("gcloud", "storage", "buckets", "create"): (1, "ERROR: PERMISSION_DENIED")}
    )
    deployer = _deployer(runner)

    assert deployer.run("full", []) == 1

    assert deployer.completed == [DeployOperation.SECRETS]
    assert runner.invoked("gcloud", "secrets", "create")
    assert not runner.invoked("gcloud", "run", "deploy")
    assert not runner.invoked("gcloud", "beta", "run", "services", "update")
    assert not runner.invoked("gcloud", "run", "services", "describe")


def test_existing_secrets_do_not_fail_the_run():
    runner = FakeGcloud(
        failures={("gcloud", "secrets", "create"): (1, "ERROR: Secret [pgadmin-email] already exists.")}
    )

    assert _deployer(runner).run("secrets", []) == 0
    assert runner.invoked("gcloud", "secrets", "add-iam-policy-binding")


def test_other_secret_errors_fail_the_run():
    runner = FakeGcloud(failures={("gcloud", "secrets", "create"): (1, "ERROR: PERMISSION_DENIED")})

    assert _deployer(runner).run("secrets", []) == 1
    assert not runner.invoked("gcloud", "secrets", "add-iam-policy-binding")


def test_url_is_read_only(capsys):
    runner = FakeGcloud()

    assert _deployer(runner).run("url", []) == 0

    assert "Service URL: https://pgadmin.run.app" in capsys.readouterr().out
    assert [cmd[:4] for cmd in runner.calls] == [["gcloud", "run", "services", "describe"]]


def test_aborted_credentials_prompt_is_a_cancellation(capsys):
    def aborted_prompt():
        raise click.Abort()

    runner = FakeGcloud()

    assert Deployer(run_cmd=runner, prompt_credentials=aborted_prompt).run("secrets", []) == 1

    out = capsys.readouterr().out
    assert "Operation cancelled by user." in out
    assert "Unexpected error" not in out
    assert not runner.invoked("gcloud", "secrets", "create")


def test_banner_precedes_valid_commands(capsys):
    assert _deployer(FakeGcloud()).run("url", []) == 0

    assert "Project: ut-dnr-ugs-mappingdb-prod" in capsys.readouterr().out
