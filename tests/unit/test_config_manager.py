"""Tests for config manager."""

from pathlib import Path

import pytest

from cloudrun_deploy.client.errors import ConfigurationError
from cloudrun_deploy.config.manager import ConfigManager


def _manager(tmp_path: Path, **env: str) -> ConfigManager:
    return ConfigManager(env_file=tmp_path / ".env", environ=dict(env))


def _no_prompt(suggestion: str) -> str | None:
    raise AssertionError("bucket prompt should not be called")


class TestLoadEnvFile:
    def test_missing_file(self, tmp_path: Path):
        mgr = _manager(tmp_path)
        assert mgr.load_env_file() == {}
        assert mgr.environ == {}

    def test_file_overrides_environment(self, tmp_path: Path):
        (tmp_path / ".env").write_text(
            "# comment line\nREGION=europe-west1\nCLOUD_STORAGE_BUCKET=from-file\n"
        )
        mgr = _manager(tmp_path, REGION="us-east1")
        assert mgr.load_env_file() == {"REGION": "europe-west1", "CLOUD_STORAGE_BUCKET": "from-file"}
        assert mgr.get("REGION") == "europe-west1"
        assert mgr.get("CLOUD_STORAGE_BUCKET") == "from-file"

    def test_default_targets_process_environment(self, tmp_path: Path):
        import os

        (tmp_path / ".env").write_text("IMAGE_TAG=v9\n")
        mgr = ConfigManager(env_file=tmp_path / ".env")
        mgr.load_env_file()
        assert os.environ["IMAGE_TAG"] == "v9"


class TestResolve:
    def test_env_project_skips_lookup(self, tmp_path: Path):
        mgr = _manager(tmp_path, GCLOUD_PROJECT="env-project")
        assert mgr.resolve_project(lambda: "gcloud-project") == "env-project"

    def test_project_from_lookup(self, tmp_path: Path):
        mgr = _manager(tmp_path)
        assert mgr.resolve_project(lambda: "gcloud-project") == "gcloud-project"

    def test_empty_env_project_falls_back(self, tmp_path: Path):
        mgr = _manager(tmp_path, GCLOUD_PROJECT="")
        assert mgr.resolve_project(lambda: "gcloud-project") == "gcloud-project"

    def test_no_project_raises(self, tmp_path: Path):
        mgr = _manager(tmp_path)
        with pytest.raises(ConfigurationError, match="No GCP project set"):
            mgr.resolve_project(lambda: None)

    def test_bucket_from_env(self, tmp_path: Path):
        mgr = _manager(tmp_path, CLOUD_STORAGE_BUCKET="env-bucket")
        assert mgr.resolve_bucket("p", _no_prompt) == "env-bucket"

    def test_bucket_prompt_gets_suggestion(self, tmp_path: Path):
        seen = []

        def prompt(suggestion: str) -> str:
            seen.append(suggestion)
            return "  typed-bucket "

        mgr = _manager(tmp_path)
        assert mgr.resolve_bucket("my-project", prompt) == "typed-bucket"
        assert seen == ["my-project.appspot.com"]

    @pytest.mark.parametrize("answer", [None, "", "   "])
    def test_bucket_required(self, tmp_path: Path, answer):
        mgr = _manager(tmp_path)
        with pytest.raises(ConfigurationError, match="bucket name is required"):
            mgr.resolve_bucket("p", lambda s: answer)

    def test_resolve_defaults(self, tmp_path: Path):
        mgr = _manager(tmp_path, CLOUD_STORAGE_BUCKET="b")
        cfg = mgr.resolve(lambda: "p", _no_prompt)
        assert cfg.project == "p"
        assert cfg.bucket == "b"
        assert cfg.region == "us-central1"
        assert cfg.allow_unauthenticated is False

    def test_resolve_overrides(self, tmp_path: Path):
        mgr = _manager(
            tmp_path,
            GCLOUD_PROJECT="p",
            CLOUD_STORAGE_BUCKET="b",
            REGION="asia-east1",
            HOSTNAME="api.example.com",
            IMAGE_TAG="abc123",
            SERVICE_ACCOUNT="deploy@p.iam.gserviceaccount.com",
            ALLOW_UNAUTHENTICATED="true",
            CORS_ORIGIN_ALLOW_LIST="https://a.com",
            DEPLOY_MEMORY="2Gi",
            DEPLOY_MAX_INSTANCES="3",
            DEPLOY_DOCKERFILE="Dockerfile.prod",
            DEPLOY_VERIFY_HEALTH="TRUE",
        )
        cfg = mgr.resolve(lambda: None, _no_prompt)
        assert cfg.region == "asia-east1"
        assert cfg.hostname == "api.example.com"
        assert cfg.image_tag == "abc123"
        assert cfg.service_account == "deploy@p.iam.gserviceaccount.com"
        assert cfg.allow_unauthenticated is True
        assert cfg.cors_allow_list == "https://a.com"
        assert cfg.memory == "2Gi"
        assert cfg.max_instances == 3
        assert cfg.dockerfile == "Dockerfile.prod"
        assert cfg.verify_health is True

    @pytest.mark.parametrize("value", ["false", "yes", "1"])
    def test_allow_unauthenticated_needs_true(self, tmp_path: Path, value: str):
        mgr = _manager(tmp_path, ALLOW_UNAUTHENTICATED=value)
        assert mgr.build("p", "b").allow_unauthenticated is False

    def test_invalid_value_names_variable(self, tmp_path: Path):
        mgr = _manager(tmp_path, DEPLOY_TIMEOUT="soon")
        with pytest.raises(ConfigurationError, match="DEPLOY_TIMEOUT"):
            mgr.build("p", "b")

    def test_resolve_reports_project_before_bucket(self, tmp_path: Path):
        events = []

        def prompt(suggestion: str) -> str:
            events.append(("bucket", suggestion))
            return "b"

        mgr = _manager(tmp_path)
        cfg = mgr.resolve(lambda: "p", prompt, on_project=lambda p: events.append(("project", p)))
        assert events == [("project", "p"), ("bucket", "p.appspot.com")]
        assert cfg.bucket == "b"

    def test_resolve_stops_before_callback_without_project(self, tmp_path: Path):
        events = []
        mgr = _manager(tmp_path)
        with pytest.raises(ConfigurationError):
            mgr.resolve(lambda: None, _no_prompt, on_project=events.append)
        assert events == []
