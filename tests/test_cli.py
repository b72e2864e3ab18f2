"""Tests for the ``squadboard`` command line."""

import asyncio
from unittest.mock import patch

import pytest

from squadboard.__main__ import main
from squadboard.mission_control import (
    FileBlobStore,
    FileMissionControlStore,
    MissionControlManager,
    UrlSigner,
)


@pytest.fixture
def manager(tmp_path, monkeypatch):
    import squadboard.mission_control.manager as manager_module

    manager = MissionControlManager(
        FileMissionControlStore(tmp_path / "mission_control"),
        FileBlobStore(tmp_path / "blobs"),
        signer=UrlSigner("cli-key"),
        base_url="http://localhost:8888",
    )
    monkeypatch.setattr(manager_module, "_manager_instance", manager)
    return manager


class TestCLI:
    def test_seed_command(self, manager):
        with patch("sys.argv", ["squadboard", "seed"]):
            main()

        agents = asyncio.run(manager.list_agents())
        assert [a.name for a in agents] == ["mike", "nash", "dev", "otto"]
        tasks = asyncio.run(manager.list_tasks())
        assert len(tasks) == 1

    def test_serve_command_uses_settings(self, monkeypatch):
        from squadboard.config import get_settings

        monkeypatch.setenv("SQUADBOARD_WEB_PORT", "9123")
        get_settings.cache_clear()
        try:
            with patch("sys.argv", ["squadboard", "serve", "--host", "0.0.0.0"]), patch(
                "squadboard.api.serve.run_api_server"
            ) as mock_run:
                main()
        finally:
            get_settings.cache_clear()

        mock_run.assert_called_once_with(host="0.0.0.0", port=9123, dev=False)

    def test_unknown_command(self):
        with patch("sys.argv", ["squadboard", "launch"]), pytest.raises(SystemExit):
            main()
