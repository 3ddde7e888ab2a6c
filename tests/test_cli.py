"""
Tests for the CLI interface.
"""

from unittest.mock import Mock, patch
from click.testing import CliRunner

from submodule_sync.cli import cli
from submodule_sync.models import (
    DivergenceState, ReconcileStatus, RepinResult, RepinStatus, SubmoduleReport,
    SyncError, SyncOutcome, SyncState, UpdateResult, UpdateStage,
)


def _done_outcome():
    return SyncOutcome(
        state=SyncState.DONE,
        update=UpdateResult(success=True),
        reports=[
            SubmoduleReport(path="server", divergence=DivergenceState(True, False), status=ReconcileStatus.RECONCILED),
            SubmoduleReport(path="ui", divergence=DivergenceState(False, False), status=ReconcileStatus.CLEAN),
        ],
        repin=RepinResult(status=RepinStatus.PUSHED, staged_paths=["server"]),
    )


class TestCLI:
    """Test CLI commands."""

    def setup_method(self):
        """Setup test environment."""
        self.runner = CliRunner()

    def test_cli_help(self):
        result = self.runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'Git Submodule Sync' in result.output

    def test_version_option(self):
        result = self.runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert 'submodule-sync' in result.output

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_sync_success(self, mock_orchestrator_class):
        mock_orchestrator = Mock()
        mock_orchestrator.run.return_value = _done_outcome()
        mock_orchestrator_class.return_value = mock_orchestrator

        result = self.runner.invoke(cli, ['sync', '-s', 'server', '-s', 'ui'])

        assert result.exit_code == 0
        assert 'Sync Summary' in result.output
        assert 'server' in result.output
        assert 'committed and pushed' in result.output
        assert 'SYNC COMPLETED' in result.output

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_sync_forwards_config(self, mock_orchestrator_class):
        mock_orchestrator = Mock()
        mock_orchestrator.run.return_value = _done_outcome()
        mock_orchestrator_class.return_value = mock_orchestrator

        result = self.runner.invoke(
            cli, ['sync', '-s', 'ui/', '--submodule', 'server', '--branch', 'develop', '--remote', 'upstream']
        )

        assert result.exit_code == 0
        config = mock_orchestrator_class.call_args[0][0]
        assert config.submodule_paths == ('ui', 'server')
        assert config.integration_branch == 'develop'
        assert config.remote_name == 'upstream'

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_sync_defaults(self, mock_orchestrator_class):
        mock_orchestrator = Mock()
        mock_orchestrator.run.return_value = _done_outcome()
        mock_orchestrator_class.return_value = mock_orchestrator

        self.runner.invoke(cli, ['sync'])

        config = mock_orchestrator_class.call_args[0][0]
        assert config.submodule_paths == ()
        assert config.integration_branch == 'main'
        assert config.remote_name == 'origin'

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_sync_aborted_exits_one(self, mock_orchestrator_class):
        mock_orchestrator = Mock()
        mock_orchestrator.run.return_value = SyncOutcome(
            state=SyncState.ABORTED,
            update=UpdateResult(success=False, failed_stage=UpdateStage.INIT, error="boom"),
        )
        mock_orchestrator_class.return_value = mock_orchestrator

        result = self.runner.invoke(cli, ['sync'])

        assert result.exit_code == 1
        assert 'SYNC ABORTED' in result.output
        assert 'Sync Summary' not in result.output

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_sync_with_failed_submodule_still_exits_zero(self, mock_orchestrator_class):
        outcome = _done_outcome()
        outcome.reports[0].status = ReconcileStatus.FAILED
        outcome.repin = RepinResult()
        mock_orchestrator = Mock()
        mock_orchestrator.run.return_value = outcome
        mock_orchestrator_class.return_value = mock_orchestrator

        result = self.runner.invoke(cli, ['sync'])

        assert result.exit_code == 0
        assert 'Failed' in result.output
        assert 'not needed' in result.output

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_sync_summary_shows_failure_reasons(self, mock_orchestrator_class):
        outcome = _done_outcome()
        outcome.reports[0].status = ReconcileStatus.FAILED
        outcome.reports[0].error = "push rejected by remote"
        outcome.repin = RepinResult(status=RepinStatus.STATUS_FAILED, error="index locked")
        mock_orchestrator = Mock()
        mock_orchestrator.run.return_value = outcome
        mock_orchestrator_class.return_value = mock_orchestrator

        result = self.runner.invoke(cli, ['sync'])

        assert result.exit_code == 0
        assert 'server: push rejected by remote' in result.output
        assert 'could not read status: index locked' in result.output

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_sync_error_handling(self, mock_orchestrator_class):
        mock_orchestrator_class.side_effect = SyncError("No submodules configured")

        result = self.runner.invoke(cli, ['sync'])

        assert result.exit_code == 1
        assert 'Sync Error' in result.output

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_sync_interrupted(self, mock_orchestrator_class):
        mock_orchestrator = Mock()
        mock_orchestrator.run.side_effect = KeyboardInterrupt()
        mock_orchestrator_class.return_value = mock_orchestrator

        result = self.runner.invoke(cli, ['sync'])

        assert result.exit_code == 130
        assert 'cancelled by user' in result.output

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_status_command(self, mock_orchestrator_class):
        mock_orchestrator = Mock()
        mock_orchestrator.collect_status.return_value = [
            SubmoduleReport(path="server", divergence=DivergenceState(False, True), status=ReconcileStatus.DIVERGENT),
            SubmoduleReport(path="ui", divergence=None, status=ReconcileStatus.DETECTION_FAILED),
        ]
        mock_orchestrator_class.return_value = mock_orchestrator

        result = self.runner.invoke(cli, ['status'])

        assert result.exit_code == 0
        assert 'Submodule Status' in result.output
        assert 'Divergent' in result.output
        mock_orchestrator.run.assert_not_called()

    @patch('submodule_sync.cli.SyncOrchestrator')
    def test_status_error(self, mock_orchestrator_class):
        mock_orchestrator_class.side_effect = SyncError("not a repo")
        result = self.runner.invoke(cli, ['status'])
        assert result.exit_code == 1
        assert 'Error getting status' in result.output

    def test_version_command(self):
        result = self.runner.invoke(cli, ['version'])
        assert result.exit_code == 0
        assert 'submodule-sync' in result.output

    def test_invalid_command(self):
        result = self.runner.invoke(cli, ['invalid-command'])
        assert result.exit_code != 0
