"""Tests for BuildProgress class."""

from gallerygen.build_progress import BuildProgress
from gallerygen.build_stats import BuildStats


class TestBuildProgress:
    """Tests for BuildProgress class."""

    def test_init_defaults(self, logger):
        """Test default initialization."""
        progress = BuildProgress(logger=logger)

        assert progress.show_files is False
        assert progress.log_interval == 25

    def test_on_file_processed_show_files(self, logger, make_entry, capsys):
        """Test show_files output for a processed image."""
        progress = BuildProgress(show_files=True, logger=logger)

        progress.on_file_processed(make_entry(name='IMG_1'), bytes_written=5000)

        captured = capsys.readouterr()
        assert 'OK' in captured.out
        assert 'IMG_1' in captured.out
        assert 'IMG_1 - 1600x1200, original 12.0 MP' in captured.out
        assert '4.9 KB' in captured.out

    def test_on_file_processed_quiet(self, logger, make_entry, capsys):
        """Test nothing is printed without show_files."""
        progress = BuildProgress(logger=logger)

        progress.on_file_processed(make_entry())

        assert capsys.readouterr().out == ''

    def test_progress_logged_at_interval(self, logger, caplog):
        """Test progress is logged every log_interval images."""
        progress = BuildProgress(log_interval=10, logger=logger)
        stats = BuildStats(total_to_process=100)

        with caplog.at_level('INFO', logger='test'):
            stats.processed = 5
            progress.on_progress_update(stats)
            stats.processed = 10
            progress.on_progress_update(stats)

        assert len(caplog.records) == 1
        assert '10/100' in caplog.records[0].getMessage()

