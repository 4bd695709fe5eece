"""Tests for rimsync.install_state module."""

from pathlib import Path

from rimsync.install_state import InstallStateChecker
from rimsync.models import InstallState


class TestInstallStateChecker:
    def test_missing(self, checker):
        assert checker.classify("123") is InstallState.MISSING

    def test_installed(self, checker, mods_dir, make_mod_dir):
        make_mod_dir(mods_dir / "123")

        assert checker.classify("123") is InstallState.INSTALLED

    def test_installed_wins_over_cached(self, checker, mods_dir, steamcmd, make_mod_dir):
        make_mod_dir(mods_dir / "123")
        make_mod_dir(steamcmd.cache_dir / "123")

        assert checker.classify("123") is InstallState.INSTALLED

    def test_cached(self, checker, steamcmd, make_mod_dir):
        make_mod_dir(steamcmd.cache_dir / "123")

        assert checker.classify("123") is InstallState.CACHED

    def test_file_in_mods_dir_is_not_installed(self, checker, mods_dir):
        mods_dir.mkdir()
        (mods_dir / "123").write_text("not a mod")

        assert not checker.is_installed("123")

    def test_file_in_cache_is_not_cached(self, checker, steamcmd):
        steamcmd.cache_dir.mkdir(parents=True)
        (steamcmd.cache_dir / "123").write_text("partial download")

        assert not checker.is_cached("123")
        assert checker.classify("123") is InstallState.MISSING

    def test_cache_dir_layout(self, steamcmd):
        assert steamcmd.cache_dir == steamcmd.path.parent / "steamapps" / "workshop" / "content" / "294100"

    def test_probe_errors_read_as_absent(self, monkeypatch, tmp_path):
        checker = InstallStateChecker(tmp_path / "Mods", tmp_path / "cache")

        def broken(self):
            raise PermissionError("Permission denied")

        monkeypatch.setattr(Path, "is_dir", broken)
        monkeypatch.setattr(Path, "exists", broken)

        assert checker.classify("123") is InstallState.MISSING
