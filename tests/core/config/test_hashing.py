# tests/core/config/test_hashing.py
"""
Testes de hashing canônico: identidade dos settings e chave de cache.

Os testes asseguram que:
- o hash dos settings independe da ordem de inserção das chaves
- qualquer mudança de valor altera o hash
- a chave de cache muda quando o conteúdo de uma location muda
- locations inexistentes participam da chave (arquivos futuros invalidam)
"""

from pathlib import Path

import pytest

from atlas_codegen.core.config.hashing import compute_cache_key, compute_config_hash


def test_config_hash_is_order_independent():
    a = {"engine": {"fail_fast": True}, "project": {"base_dir": "."}}
    b = {"project": {"base_dir": "."}, "engine": {"fail_fast": True}}
    assert compute_config_hash(a) == compute_config_hash(b)
    assert len(compute_config_hash(a)) == 64


def test_config_hash_changes_with_value():
    assert compute_config_hash({"a": 1}) != compute_config_hash({"a": 2})


def test_config_hash_rejects_non_dict():
    with pytest.raises(TypeError):
        compute_config_hash(["a"])


def test_cache_key_tracks_directory_content(tmp_path: Path):
    migrations = tmp_path / "db" / "migration"
    migrations.mkdir(parents=True)
    (migrations / "V1__init.sql").write_text("create table a(id int);", encoding="utf-8")

    before = compute_cache_key("fp", [migrations])
    assert compute_cache_key("fp", [migrations]) == before

    (migrations / "V2__more.sql").write_text("create table b(id int);", encoding="utf-8")
    assert compute_cache_key("fp", [migrations]) != before


def test_cache_key_missing_location_becomes_present(tmp_path: Path):
    future = tmp_path / "build" / "resources" / "main" / "db" / "migration"
    missing = compute_cache_key("fp", [future])

    future.mkdir(parents=True)
    (future / "V1__init.sql").write_text("select 1;", encoding="utf-8")

    assert compute_cache_key("fp", [future]) != missing


def test_cache_key_depends_on_fingerprint(tmp_path: Path):
    assert compute_cache_key("a", [tmp_path]) != compute_cache_key("b", [tmp_path])
