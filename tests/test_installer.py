"""
Tests for the bower dependency installer.
"""

from unittest.mock import patch

import pytest

from arcbuilder.errors import StageFailure
from arcbuilder.infra.installer import DependencyInstaller


@pytest.fixture
def bower_workspace(workspace_dir):
    (workspace_dir / "bower.json").write_text("{}")
    return workspace_dir


class TestDependencyInstaller:
    """Tests for DependencyInstaller."""

    def test_missing_bower_json(self, workspace_dir, recording_logger):
        installer = DependencyInstaller(workspace_dir, recording_logger)
        with pytest.raises(StageFailure, match="bower.json not found"):
            installer.install_dependencies()

    @patch("arcbuilder.infra.installer.run_command")
    @patch("arcbuilder.infra.installer.shutil.which", return_value="/usr/bin/bower")
    def test_install_quiet(self, mock_which, mock_run, bower_workspace, recording_logger):
        """Test that bower on PATH is used with --quiet."""
        installer = DependencyInstaller(bower_workspace, recording_logger)
        assert installer.install_dependencies() is True
        mock_run.assert_called_once()
        cmd = mock_run.call_args[0][0]
        assert cmd == ["bower", "install", "--allow-root", "--quiet"]
        assert mock_run.call_args[1]["cwd"] == bower_workspace
        assert mock_run.call_args[1]["timeout"] == 600

    @patch("arcbuilder.infra.installer.run_command")
    @patch("arcbuilder.infra.installer.shutil.which", return_value="/usr/bin/bower")
    def test_install_verbose(self, mock_which, mock_run, bower_workspace, recording_logger):
        installer = DependencyInstaller(bower_workspace, recording_logger, {"verbose": True})
        installer.install_dependencies()
        cmd = mock_run.call_args[0][0]
        assert "--quiet" not in cmd
        assert mock_run.call_args[1]["logger"] is recording_logger

    @patch("arcbuilder.infra.installer.run_command")
    @patch("arcbuilder.infra.installer.shutil.which", return_value=None)
    def test_local_bower(self, mock_which, mock_run, bower_workspace, recording_logger):
        """Test that a bower installed in the workspace is found."""
        local = bower_workspace / "node_modules" / ".bin" / "bower"
        local.parent.mkdir(parents=True)
        local.write_text("")
        DependencyInstaller(bower_workspace, recording_logger).install_dependencies()
        assert mock_run.call_args[0][0][0] == str(local)

    @patch("arcbuilder.infra.installer.shutil.which", return_value=None)
    def test_installs_bower_with_npm(self, mock_which, bower_workspace, recording_logger):
        """Test that bower is installed locally when it cannot be found."""
        local = bower_workspace / "node_modules" / ".bin" / "bower"
        commands = []

        def fake_run(cmd, **kwargs):
            commands.append(cmd)
            if cmd[:2] == ["npm", "install"]:
                local.parent.mkdir(parents=True)
                local.write_text("")
            return ""

        with patch("arcbuilder.infra.installer.run_command", side_effect=fake_run):
            DependencyInstaller(bower_workspace, recording_logger).install_dependencies()

        assert commands == [
            ["npm", "install", "bower"],
            [str(local), "install", "--allow-root", "--quiet"],
        ]

    @patch("arcbuilder.infra.installer.run_command")
    @patch("arcbuilder.infra.installer.shutil.which", return_value=None)
    def test_npm_install_without_bower(self, mock_which, mock_run, bower_workspace, recording_logger):
        installer = DependencyInstaller(bower_workspace, recording_logger)
        with pytest.raises(StageFailure, match="bower was not installed"):
            installer.install_dependencies()

    @patch("arcbuilder.infra.installer.run_command")
    @patch("arcbuilder.infra.installer.shutil.which", return_value="/usr/bin/npx")
    def test_environment_overrides(self, mock_which, mock_run, bower_workspace, recording_logger, monkeypatch):
        monkeypatch.setenv("ARCBUILD_BOWER", "npx bower")
        monkeypatch.setenv("ARCBUILD_INSTALL_TIMEOUT", "30")
        DependencyInstaller(bower_workspace, recording_logger).install_dependencies()
        assert mock_run.call_args[0][0][:2] == ["npx", "bower"]
        assert mock_run.call_args[1]["timeout"] == 30
