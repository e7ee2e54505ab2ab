"""Tests for the exception hierarchy."""

from node_packages.error_handling import (
    ConfigurationError, ManagerScanError, ManifestError, NodePackagesError, TraversalError
)


def test_subclasses_share_base():
    for error_class in (ManifestError, TraversalError, ManagerScanError, ConfigurationError):
        assert issubclass(error_class, NodePackagesError)


def test_str_joins_code_context_and_cause():
    cause = OSError("permission denied")
    error = TraversalError("cannot list root", root_path="/cache", error_code="ROOT", cause=cause)

    assert str(error) == (
        "cannot list root | Code: ROOT | Context: root_path=/cache | Caused by: permission denied"
    )
    assert error.root_path == "/cache"


def test_to_dict():
    error = ManifestError("bad json", file_path="/c/package.json", error_code="MANIFEST_DECODE_ERROR")

    assert error.to_dict() == {
        "error_type": "ManifestError",
        "message": "bad json",
        "error_code": "MANIFEST_DECODE_ERROR",
        "context": {"file_path": "/c/package.json"},
        "cause": None,
    }


def test_configuration_error_context():
    error = ConfigurationError("bad level", config_section="logging", config_key="level")

    assert error.context == {"config_section": "logging", "config_key": "level"}
    assert str(error) == "bad level | Context: config_section=logging, config_key=level"


def test_manager_scan_error_without_context():
    error = ManagerScanError("boom")

    assert error.manager is None
    assert str(error) == "boom"
