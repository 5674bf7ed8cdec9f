"""Unit tests for ParallelCleaner and remove_item."""

import shutil
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from mrclean.engine.cleaner import ParallelCleaner, remove_item
from mrclean.models.item import ItemType


@pytest.fixture
def artifacts(tmp_path: Path, make_item) -> list:
    """Three directories and two files on disk, as candidate items."""
    items = []
    for i, name in enumerate(["dist", "build", "target"]):
        directory = tmp_path / name
        (directory / "nested").mkdir(parents=True)
        (directory / "nested" / "blob.bin").write_bytes(b"d" * (100 * (i + 1)))
        items.append(make_item(directory, size=100 * (i + 1)))
    for name, size in [("app.log", 10), ("error.log", 20)]:
        path = tmp_path / name
        path.write_bytes(b"l" * size)
        items.append(make_item(path, size=size, item_type=ItemType.FILE))
    return items


class TestParallelCleanerConfiguration:
    """Tests for construction and builder methods."""

    def test_builder_methods_return_self(self) -> None:
        """with_* methods chain on the same instance."""
        cleaner = ParallelCleaner(2)
        assert cleaner.with_threads(3) is cleaner
        assert cleaner.with_dry_run(True) is cleaner
        assert cleaner.with_progress(MagicMock()) is cleaner
        assert cleaner.thread_count == 3
        assert cleaner.dry_run is True

    def test_default_thread_count_is_positive(self) -> None:
        """Without an explicit count the CPU count is used."""
        assert ParallelCleaner().thread_count >= 1

    @pytest.mark.parametrize("threads", [0, -4])
    def test_invalid_thread_count(self, threads: int) -> None:
        """Zero or negative pool sizes are rejected."""
        with pytest.raises(ValueError, match="at least 1"):
            ParallelCleaner(2).with_threads(threads)

    def test_negative_thread_count_in_constructor(self) -> None:
        """The constructor validates its argument too."""
        with pytest.raises(ValueError):
            ParallelCleaner(-1)


class TestDryRun:
    """Dry runs total items without touching the filesystem."""

    def test_dry_run_leaves_filesystem_untouched(self, artifacts: list) -> None:
        """Every path still exists and totals match the items."""
        report = ParallelCleaner(4).with_dry_run(True).clean(artifacts)

        assert report.dry_run is True
        assert report.items_deleted == 5
        assert report.bytes_freed == 630
        assert report.errors == ()
        assert all(item.path.exists() for item in artifacts)

    def test_dry_run_never_calls_removal(self, artifacts: list) -> None:
        """No deletion primitive is invoked."""
        with (
            patch("mrclean.engine.cleaner.shutil.rmtree") as mock_rmtree,
            patch("mrclean.engine.cleaner.os.unlink") as mock_unlink,
        ):
            ParallelCleaner(2).with_dry_run(True).clean(artifacts)

        mock_rmtree.assert_not_called()
        mock_unlink.assert_not_called()

    def test_dry_run_finishes_progress(self, artifacts: list) -> None:
        """The progress sink is finished in dry-run mode too."""
        progress = MagicMock()

        ParallelCleaner(2).with_dry_run(True).with_progress(progress).clean(artifacts)

        progress.increment.assert_not_called()
        progress.finish.assert_called_once()


class TestLiveClean:
    """Tests for real removal."""

    def test_removes_every_item(self, artifacts: list) -> None:
        """All items are gone and the report counts them."""
        progress = MagicMock()

        report = ParallelCleaner(3).with_progress(progress).clean(artifacts)

        assert report.dry_run is False
        assert report.items_deleted == 5
        assert report.bytes_freed == 630
        assert report.errors == ()
        assert not any(item.path.exists() for item in artifacts)
        assert progress.increment.call_count == 5
        progress.finish.assert_called_once()

    def test_matches_dry_run_totals(self, artifacts: list) -> None:
        """A dry run predicts exactly what a clean run removes."""
        predicted = ParallelCleaner(2).with_dry_run(True).clean(artifacts)
        actual = ParallelCleaner(2).clean(artifacts)

        assert (predicted.items_deleted, predicted.bytes_freed) == (
            actual.items_deleted,
            actual.bytes_freed,
        )

    def test_empty_input(self) -> None:
        """Cleaning nothing succeeds with zero counts."""
        report = ParallelCleaner(2).clean([])
        assert report.items_deleted == 0
        assert report.bytes_freed == 0

    def test_failure_does_not_stop_siblings(self, artifacts: list) -> None:
        """One failing item is reported; the rest are removed."""
        real_rmtree = shutil.rmtree
        failing = artifacts[1].path

        def fake_rmtree(path, *args, **kwargs):
            if Path(path) == failing:
                raise PermissionError(13, "Permission denied", str(path))
            return real_rmtree(path, *args, **kwargs)

        with patch("mrclean.engine.cleaner.shutil.rmtree", side_effect=fake_rmtree):
            report = ParallelCleaner(4).clean(artifacts)

        assert report.items_deleted == 4
        assert report.bytes_freed == 630 - artifacts[1].size
        assert len(report.errors) == 1
        assert report.errors[0].path == failing
        assert report.errors[0].message == "Permission denied"
        assert failing.exists()
        assert not any(item.path.exists() for item in artifacts if item.path != failing)

    def test_missing_item_is_a_failure(self, tmp_path: Path, make_item) -> None:
        """An item that vanished before removal is reported, not raised."""
        item = make_item(tmp_path / "gone.log", size=3, item_type=ItemType.FILE)

        report = ParallelCleaner(1).clean([item])

        assert report.items_deleted == 0
        assert [failure.path for failure in report.errors] == [item.path]

    def test_statistics_reset_between_calls(self, artifacts: list) -> None:
        """A second call starts from zero."""
        cleaner = ParallelCleaner(2).with_dry_run(True)
        cleaner.clean(artifacts)
        report = cleaner.clean(artifacts[:2])

        assert report.items_deleted == 2
        assert cleaner.statistics.items_deleted == 2
        assert cleaner.statistics.bytes_freed == 300


class TestRemoveItem:
    """Tests for single-item removal."""

    def test_symlink_removed_without_target(self, tmp_path: Path, make_item) -> None:
        """Removing a link leaves the linked directory intact."""
        target = tmp_path / "real"
        target.mkdir()
        (target / "keep.txt").write_text("keep")
        link = tmp_path / "dist"
        link.symlink_to(target, target_is_directory=True)

        assert remove_item(make_item(link, item_type=ItemType.SYMLINK)) is None

        assert not link.is_symlink()
        assert (target / "keep.txt").exists()

    def test_directory_removed_recursively(self, tmp_path: Path, make_item) -> None:
        """Directories are removed with their contents."""
        directory = tmp_path / "node_modules" / "a" / "b"
        directory.mkdir(parents=True)
        (directory / "index.js").write_text("x")

        assert remove_item(make_item(tmp_path / "node_modules")) is None
        assert not (tmp_path / "node_modules").exists()

    def test_error_is_returned(self, tmp_path: Path, make_item) -> None:
        """OS errors become CleanFailure values."""
        failure = remove_item(make_item(tmp_path / "missing"))

        assert failure is not None
        assert failure.path == tmp_path / "missing"
        assert failure.message
