# tests/core/config/test_settings.py
"""Testes da visão tipada dos settings de run (Settings.from_config)."""

from pathlib import Path

import pytest

from atlas_codegen.core.config.errors import InvalidConfigRootTypeError
from atlas_codegen.core.config.settings import Settings


def test_builtin_defaults_apply(tmp_path: Path):
    s = Settings.from_config({}, base_dir=tmp_path)
    assert s.base_dir == tmp_path.absolute()
    assert s.fail_fast is True
    assert s.fallback_location == "classpath:db/migration"
    assert s.container_images == {"postgresql": "postgres:17-alpine", "mysql": "mysql:8.4"}
    assert s.resource_roots == ()
    assert s.runtime_classpath == ()


def test_relative_paths_resolve_against_base_dir(tmp_path: Path):
    s = Settings.from_config(
        {
            "project": {
                "base_dir": str(tmp_path),
                "resource_roots": ["res"],
                "runtime_classpath": ["/opt/lib/a.jar"],
            }
        }
    )
    assert s.resource_roots == (tmp_path / "res",)
    assert s.runtime_classpath == (Path("/opt/lib/a.jar"),)


def test_overrides_merge_with_defaults(tmp_path: Path):
    s = Settings.from_config(
        {"engine": {"fail_fast": False}, "containers": {"images": {"mysql": "mysql:9"}}},
        base_dir=tmp_path,
    )
    assert s.fail_fast is False
    assert s.container_images["mysql"] == "mysql:9"
    assert s.container_images["postgresql"] == "postgres:17-alpine"


def test_non_dict_config_is_rejected():
    with pytest.raises(InvalidConfigRootTypeError):
        Settings.from_config(["nope"])
