"""Tests for the command-line entry point."""

import os
from unittest.mock import patch

import pytest

from mediasync import cli
from mediasync.errors import RemoteCallError
from mediasync.models import SyncSummary


@pytest.fixture
def env(clean_env, base_env, tmp_path):
    for key, value in base_env.items():
        clean_env.setenv(key, value)
    clean_env.chdir(tmp_path)
    return clean_env


def _run(*extra):
    return cli.main(["--no-log-file", "--env-file", "missing.env", *extra])


class TestMain:
    def test_success_prints_summary(self, env, capsys):
        summary = SyncSummary(assets=3, groups=1, attached=2, skipped=1)
        with patch.object(cli, "run_sync", return_value=summary) as run:
            assert _run() == 0

        out = capsys.readouterr().out
        assert "Summary: attached=2, skipped(existing)=1" in out
        assert "shpat_1234567890abcdef" not in out
        assert run.call_args.args[0].shop_domain == "example.myshopify.com"

    def test_nothing_to_do_exits_zero(self, env):
        summary = SyncSummary(message="No files returned from the asset source.")
        with patch.object(cli, "run_sync", return_value=summary):
            assert _run() == 0

    def test_missing_config_exits_non_zero(self, env, capsys):
        env.delenv("GHL_FILES_ENDPOINT")
        with patch.object(cli, "run_sync") as run:
            assert _run() == 1

        run.assert_not_called()
        assert "GHL_FILES_ENDPOINT" in capsys.readouterr().err

    def test_remote_failure_exits_non_zero(self, env, capsys):
        with patch.object(cli, "run_sync", side_effect=RemoteCallError("GraphQL HTTP 500: boom", status=500)):
            assert _run() == 1

        assert "Sync failed: GraphQL HTTP 500: boom" in capsys.readouterr().err

    def test_flags_override_environment(self, env):
        env.setenv("MEDIA_BATCH_SIZE", "8")
        with patch.object(cli, "run_sync", return_value=SyncSummary()) as run:
            assert _run("--dry-run", "--batch-size", "3", "--max-retries", "5") == 0

        settings = run.call_args.args[0]
        assert settings.dry_run is True
        assert settings.batch_size == 3
        assert settings.max_retries == 5

    def test_invalid_batch_flag(self, env):
        with patch.object(cli, "run_sync") as run:
            assert _run("--batch-size", "0") == 1
        run.assert_not_called()

    def test_env_file_is_loaded(self, clean_env, tmp_path):
        clean_env.chdir(tmp_path)
        env_file = tmp_path / "sync.env"
        env_file.write_text(
            "SHOPIFY_SHOP_DOMAIN=file.myshopify.com\n"
            "SHOPIFY_ADMIN_API_TOKEN=file-token-123\n"
            "GHL_FILES_ENDPOINT=https://files.example.com/from-file\n"
        )
        with patch.dict(os.environ), patch.object(cli, "run_sync", return_value=SyncSummary()) as run:
            assert cli.main(["--no-log-file", "--env-file", str(env_file)]) == 0

        settings = run.call_args.args[0]
        assert settings.shop_domain == "file.myshopify.com"
        assert settings.shop_domain_source == "SHOPIFY_SHOP_DOMAIN"
