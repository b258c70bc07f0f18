#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for package layering and version management contracts.
"""

import tomllib
from pathlib import Path

from viewremote import __version__ as public_version
from viewremote._version import __version__ as internal_version


PROJECT_ROOT = Path(__file__).resolve().parents[1]
PYPROJECT_PATH = PROJECT_ROOT / "pyproject.toml"


def _load_pyproject() -> dict:
    return tomllib.loads(PYPROJECT_PATH.read_text(encoding="utf-8"))


def test_version_is_single_sourced_via_viewremote_version_module():
    pyproject = _load_pyproject()
    project = pyproject["project"]

    assert project.get("dynamic") == ["version"]
    assert (
        pyproject["tool"]["setuptools"]["dynamic"]["version"]["attr"]
        == "viewremote._version.__version__"
    )
    assert public_version == internal_version


def test_core_dependencies_cover_transport_crypto_and_logging():
    deps = "\n".join(_load_pyproject()["project"]["dependencies"]).lower()

    for name in ("grpcio", "protobuf", "cryptography", "rich"):
        assert name in deps
    assert "pytest" not in deps


def test_console_script_points_at_cli_main():
    scripts = _load_pyproject()["project"]["scripts"]

    assert scripts["viewremote"] == "viewremote.cli:main"


def test_uv_default_groups_cover_dev_and_test():
    pyproject = _load_pyproject()
    groups = pyproject["dependency-groups"]
    default_groups = pyproject["tool"]["uv"]["default-groups"]

    assert "dev" in groups
    assert "test" in groups
    assert "dev" in default_groups
    assert "test" in default_groups


def test_public_api_is_lazy():
    import viewremote

    assert "ViewClient" in viewremote.__all__
    assert viewremote.ViewClient is viewremote.InvocationClient
