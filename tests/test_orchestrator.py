"""Tests for ScanOrchestrator fan-out and failure isolation."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from node_packages.config import AppConfig, ScanningConfig
from node_packages.error_handling import ConfigurationError, TraversalError
from node_packages.models import (
    DiagnosticKind, LocateResult, PackageManager, PackageRecord
)
from node_packages.orchestrator import ScanOrchestrator, scan_all
from node_packages.scanners import ManagerDescriptor, ManifestLocator

# Managers whose candidate roots all live under the home directory
HOME_ONLY_MANAGERS = ["pnpm", "yarn", "bun", "deno"]


def home_config(**scanning) -> AppConfig:
    scanning.setdefault("managers", list(HOME_ONLY_MANAGERS))
    return AppConfig(scanning=ScanningConfig(**scanning))


def fixed_roots(*relative):
    def resolve(home, environ):
        if home is None:
            return []
        return [home / r for r in relative]
    return resolve


def broken_resolver(home, environ):
    raise OSError("cache table unavailable")


class FakeLocator:
    """Returns a fixed batch per root and manager without touching the filesystem."""

    def __init__(self, per_root: int):
        self.per_root = per_root

    def locate(self, root_path, manager):
        return LocateResult(records=[
            PackageRecord(f"pkg-{i}", "1.0.0", manager, f"{root_path}/{manager.value}/{i}/package.json")
            for i in range(self.per_root)
        ])


class RootFailingLocator(ManifestLocator):

    def __init__(self, failing_root: Path):
        super().__init__()
        self.failing_root = failing_root

    def locate(self, root_path, manager):
        if Path(root_path) == self.failing_root:
            raise TraversalError("Cannot walk cache root", root_path=str(root_path))
        return super().locate(root_path, manager)


@pytest.fixture
def home(tmp_path: Path, write_manifest) -> Path:
    write_manifest(tmp_path / ".pnpm-store" / "v3" / "a" / "package.json", "left-pad", "1.3.0")
    write_manifest(tmp_path / ".cache" / "yarn" / "b" / "package.json", "react", "18.2.0")
    write_manifest(tmp_path / ".cache" / "yarn" / "c" / "package.json", raw="{oops")
    write_manifest(tmp_path / ".bun" / "install" / "global" / "d" / "package.json", "typescript", "5.4.0")
    write_manifest(tmp_path / ".cache" / "deno" / "npm" / "e" / "package.json", "chalk", "5.3.0")
    return tmp_path


class TestScan:

    def test_scans_every_manager(self, home: Path):
        report = ScanOrchestrator(home_config(), home=home, environ={}).scan()

        found = {(r.name, r.manager) for r in report.records}
        assert found == {
            ("left-pad", PackageManager.PNPM),
            ("react", PackageManager.YARN),
            ("typescript", PackageManager.BUN),
            ("chalk", PackageManager.DENO),
        }
        assert report.manager_counts == {
            PackageManager.PNPM: 1,
            PackageManager.YARN: 1,
            PackageManager.BUN: 1,
            PackageManager.DENO: 1,
        }
        assert not report.has_failures
        assert [d.kind for d in report.diagnostics] == [DiagnosticKind.DECODE_FAILURE]

    def test_environment_overrides_add_roots(self, home: Path, tmp_path_factory, write_manifest):
        yarn_cache = tmp_path_factory.mktemp("yarn-cache")
        write_manifest(yarn_cache / "x" / "package.json", "vue", "3.4.0")

        config = home_config(managers=["yarn"])
        records = ScanOrchestrator(
            config, home=home, environ={"YARN_CACHE_FOLDER": str(yarn_cache)}
        ).scan_all()

        assert sorted(r.name for r in records) == ["react", "vue"]

    def test_extra_paths_from_config(self, home: Path, tmp_path_factory, write_manifest):
        extra = tmp_path_factory.mktemp("extra")
        write_manifest(extra / "pkg" / "package.json", "lodash", "4.17.21")

        config = home_config(managers=["bun"], extra_paths={"bun": [str(extra)]})
        records = ScanOrchestrator(config, home=home, environ={}).scan_all()

        assert sorted(r.name for r in records) == ["lodash", "typescript"]

    def test_unknown_home_yields_empty_inventory(self):
        report = ScanOrchestrator(home_config(), home=None, environ={"DENO_DIR": "/x"}).scan()

        assert report.records == []
        assert not report.has_failures

    def test_duplicates_across_roots_are_kept(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path / "one" / "package.json", "dup", "1.0.0")
        write_manifest(tmp_path / "two" / "package.json", "dup", "1.0.0")
        descriptor = ManagerDescriptor(PackageManager.NPM, fixed_roots("one", "two"))

        records = ScanOrchestrator(AppConfig(), managers=[descriptor], home=tmp_path, environ={}).scan_all()

        assert len(records) == 2
        assert len({r.cache_path for r in records}) == 2

    def test_max_workers_cap_still_scans_everything(self, home: Path):
        report = ScanOrchestrator(home_config(max_workers=1), home=home, environ={}).scan()
        assert report.package_count == 4

    def test_no_managers(self):
        assert ScanOrchestrator(AppConfig(), managers=[], home=None).scan_all() == []

    def test_invalid_configured_manager(self):
        with pytest.raises(ConfigurationError):
            ScanOrchestrator(home_config(managers=["npm", "pip"]))


class TestFailureIsolation:

    def test_failing_manager_contributes_nothing(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path / "npm-cache" / "a" / "package.json", "a", "1.0.0")
        managers = [
            ManagerDescriptor(PackageManager.NPM, fixed_roots("npm-cache")),
            ManagerDescriptor(PackageManager.BUN, broken_resolver),
        ]

        report = ScanOrchestrator(AppConfig(), managers=managers, home=tmp_path, environ={}).scan()

        assert [r.name for r in report.records] == ["a"]
        assert report.failed_managers == [PackageManager.BUN]
        assert report.manager_counts[PackageManager.BUN] == 0
        failures = report.diagnostics_of(DiagnosticKind.MANAGER_FAILURE)
        assert len(failures) == 1
        assert failures[0].manager is PackageManager.BUN
        assert "cache table unavailable" in failures[0].message

    def test_all_managers_failing_still_returns(self):
        managers = [ManagerDescriptor(m, broken_resolver) for m in PackageManager]

        report = ScanOrchestrator(AppConfig(), managers=managers, home=Path("/nowhere")).scan()

        assert report.records == []
        assert sorted(report.failed_managers) == sorted(PackageManager)

    def test_failing_root_is_excluded(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path / "good" / "package.json", "kept", "1.0.0")
        write_manifest(tmp_path / "bad" / "package.json", "lost", "1.0.0")
        descriptor = ManagerDescriptor(PackageManager.YARN, fixed_roots("bad", "good"))
        locator = RootFailingLocator(tmp_path / "bad")

        report = ScanOrchestrator(
            AppConfig(), managers=[descriptor], locator=locator, home=tmp_path, environ={}
        ).scan()

        assert [r.name for r in report.records] == ["kept"]
        assert not report.has_failures
        roots = report.diagnostics_of(DiagnosticKind.ROOT_FAILURE)
        assert [d.path for d in roots] == [str(tmp_path / "bad")]

    def test_pathological_manifest_does_not_fail_manager(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path / "cache" / "good" / "package.json", "good", "1.0.0")
        write_manifest(tmp_path / "cache" / "weird" / "package.json", raw="[" * 100000 + "]" * 100000)
        descriptor = ManagerDescriptor(PackageManager.NPM, fixed_roots("cache"))

        report = ScanOrchestrator(AppConfig(), managers=[descriptor], home=tmp_path, environ={}).scan()

        assert [r.name for r in report.records] == ["good"]
        assert report.failed_managers == []
        assert [d.kind for d in report.diagnostics] == [DiagnosticKind.DECODE_FAILURE]


class TestConcurrency:

    def test_no_records_lost_under_concurrent_merges(self):
        managers = [ManagerDescriptor(m, fixed_roots("a", "b")) for m in PackageManager]
        orchestrator = ScanOrchestrator(
            AppConfig(), managers=managers, locator=FakeLocator(300), home=Path("/h"), environ={}
        )

        records = orchestrator.scan_all()

        assert len(records) == len(PackageManager) * 2 * 300
        assert len({r.cache_path for r in records}) == len(records)

    def test_repeated_concurrent_scans_are_independent(self):
        managers = [ManagerDescriptor(m, fixed_roots("cache")) for m in PackageManager]
        orchestrator = ScanOrchestrator(
            AppConfig(), managers=managers, locator=FakeLocator(100), home=Path("/h"), environ={}
        )

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: orchestrator.scan_all(), range(16)))

        expected = len(PackageManager) * 100
        assert all(len(records) == expected for records in results)


def test_module_scan_all_uses_global_config(monkeypatch, home: Path):
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("NODE_PACKAGES_MANAGERS", "pnpm,deno")

    records = scan_all()

    assert sorted(r.name for r in records) == ["chalk", "left-pad"]
