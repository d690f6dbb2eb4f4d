"""Tests for kubesite.cli."""

from pathlib import Path
from unittest.mock import patch

import pytest

from kubesite import config
from kubesite.cli import main


@pytest.fixture(autouse=True)
def keep_logging_config():
    """Leave the test session's logging handlers in place."""
    with patch("kubesite.config.configure_logging"):
        yield


@pytest.fixture
def content(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    (root / "learn").mkdir(parents=True)
    (root / "learn" / "workloads.md").write_text("---\ntitle: Deployments\n---\nRolling updates.", encoding="utf-8")
    return root


class TestCli:
    def test_build_then_audit(self, content, tmp_path, capsys):
        out = tmp_path / "dist"
        assert main(["build", "--content-dir", str(content), "--output-dir", str(out)]) == 0
        assert (out / "learn" / "workloads" / "index.html").is_file()
        assert "Pre-rendered: /learn/workloads" in capsys.readouterr().out

        assert main(["audit", "--output-dir", str(out)]) == 0
        assert "1 page(s), 0 issue(s)" in capsys.readouterr().out

    def test_build_failure_exit_code(self, content, tmp_path):
        (content / "learn" / "broken.md").write_bytes(b"\xff\xfe")
        out = tmp_path / "dist"
        assert main(["build", "--content-dir", str(content), "--output-dir", str(out)]) == 1

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])


class TestServe:
    def test_content_origin_follows_port(self):
        with patch.dict("os.environ", clear=False) as env, patch("uvicorn.run") as run, patch.object(
            config, "CONTENT_ORIGIN", "http://127.0.0.1:8000"
        ):
            env.pop("KUBESITE_CONTENT_ORIGIN", None)
            assert main(["serve", "--host", "0.0.0.0", "--port", "9100"]) == 0
            assert config.CONTENT_ORIGIN == "http://127.0.0.1:9100"
            assert env["KUBESITE_CONTENT_ORIGIN"] == "http://127.0.0.1:9100"
        run.assert_called_once_with("kubesite.main:app", host="0.0.0.0", port=9100, reload=False)

    def test_configured_origin_wins(self):
        with patch.dict(
            "os.environ", {"KUBESITE_CONTENT_ORIGIN": "https://content.example.com"}
        ), patch("uvicorn.run"), patch.object(config, "CONTENT_ORIGIN", "https://content.example.com"):
            main(["serve", "--port", "9100"])
            assert config.CONTENT_ORIGIN == "https://content.example.com"
