# tests/core/resolution/test_locations.py
"""
Testes do LocationResolver.

Os testes asseguram que:
- `classpath:` expande para cada raiz de recursos (mesmo inexistente)
  e para archives/diretórios externos que contêm o caminho relativo
- `filesystem:` absoluto é retornado como está; relativo usa o base dir
- tokens sem prefixo são sempre relativos ao chamador
- archives corrompidos viram warning e não abortam a resolução
- a união é deduplicada preservando ordem
"""

from pathlib import Path

import pytest

from atlas_codegen.core.model.context import LocationKind
from atlas_codegen.core.resolution.locations import LocationResolver


def _paths(locations):
    return [loc.path for loc in locations]


def test_classpath_roots_and_matching_archive(ctx, tmp_path: Path, make_archive):
    """`classpath:db/migration` com raízes [A, B] + archive → {A/db/migration, B/db/migration, archive}."""
    project = tmp_path / "project"
    a = project / "A"
    b = project / "B"
    archive = make_archive("migrations.jar", {"db/migration/V1.sql": "select 1;"})
    other = make_archive("unrelated.jar", {"META-INF/MANIFEST.MF": ""})

    resolver = LocationResolver(
        ctx, base_dir=project, resource_roots=[a, b], runtime_classpath=[archive, other]
    )
    resolved = resolver.resolve("classpath:db/migration")

    assert _paths(resolved) == [a / "db" / "migration", b / "db" / "migration", archive]
    assert [loc.kind for loc in resolved] == [
        LocationKind.RESOURCE_ROOT,
        LocationKind.RESOURCE_ROOT,
        LocationKind.ARCHIVE,
    ]


def test_default_resource_roots(ctx, project_dir: Path):
    resolver = LocationResolver(ctx, base_dir=project_dir)
    assert _paths(resolver.resolve("classpath:/db/migration")) == [
        project_dir / "src" / "main" / "resources" / "db" / "migration",
        project_dir / "build" / "resources" / "main" / "db" / "migration",
    ]


def test_archive_directory_entry_and_prefix_match(ctx, tmp_path: Path, make_archive):
    dir_entry = make_archive("dir-entry.zip", {"db/migration/": ""})
    nested = make_archive("nested.JAR", {"db/migration/v2/V2.sql": ""})
    sibling = make_archive("sibling.jar", {"db/migration_old/V1.sql": ""})

    resolver = LocationResolver(
        ctx,
        base_dir=tmp_path / "project",
        resource_roots=[tmp_path / "project" / "res"],
        runtime_classpath=[dir_entry, nested, sibling],
    )
    paths = _paths(resolver.resolve("classpath:db/migration"))

    assert dir_entry in paths
    assert nested in paths
    assert sibling not in paths


def test_empty_relative_path_means_root(ctx, tmp_path: Path, make_archive):
    archive = make_archive("any.jar", {"x.sql": ""})
    root = tmp_path / "project" / "res"
    resolver = LocationResolver(
        ctx, base_dir=tmp_path / "project", resource_roots=[root], runtime_classpath=[archive]
    )
    assert _paths(resolver.resolve("classpath:/")) == [root, archive]


def test_external_directory_added_only_if_exists(ctx, tmp_path: Path):
    ext_present = tmp_path / "ext1"
    (ext_present / "db" / "migration").mkdir(parents=True)
    ext_absent = tmp_path / "ext2"
    ext_absent.mkdir()
    project = tmp_path / "project"

    resolver = LocationResolver(
        ctx,
        base_dir=project,
        resource_roots=[project / "res"],
        runtime_classpath=[ext_present, ext_absent],
    )
    resolved = resolver.resolve("classpath:db/migration")

    assert _paths(resolved) == [project / "res" / "db" / "migration", ext_present / "db" / "migration"]
    assert resolved[1].kind == LocationKind.CLASSPATH_DIRECTORY


def test_classpath_entries_inside_project_are_ignored(ctx, project_dir: Path):
    internal = project_dir / "build" / "classes"
    (internal / "db" / "migration").mkdir(parents=True)
    resolver = LocationResolver(ctx, base_dir=project_dir, runtime_classpath=[internal])

    assert internal / "db" / "migration" not in _paths(resolver.resolve("classpath:db/migration"))


def test_corrupt_archive_is_warning_not_failure(ctx, tmp_path: Path):
    libs = tmp_path / "libs"
    libs.mkdir()
    broken = libs / "broken.jar"
    broken.write_bytes(b"this is not a zip file")

    resolver = LocationResolver(
        ctx, base_dir=tmp_path / "project", resource_roots=[tmp_path / "project" / "res"],
        runtime_classpath=[broken],
    )
    resolved = resolver.resolve("classpath:db/migration")

    assert broken not in _paths(resolved)
    assert len(ctx.warnings["locations"]) == 1
    assert "broken.jar" in ctx.warnings["locations"][0]
    assert ctx.events_for("locations")[0]["code"] == "ARCHIVE_INSPECTION"


def test_filesystem_absolute_ignores_base_dir(ctx, tmp_path: Path):
    absolute = tmp_path / "abs" / "path"
    resolver = LocationResolver(ctx, base_dir=tmp_path / "project")

    assert _paths(resolver.resolve(f"filesystem:{absolute}")) == [absolute]
    assert _paths(resolver.resolve(f"filesystem:{absolute}", base_dir=tmp_path / "elsewhere")) == [absolute]


def test_filesystem_relative_uses_caller_base_dir(ctx, tmp_path: Path):
    resolver = LocationResolver(ctx, base_dir=tmp_path / "project")
    assert _paths(resolver.resolve("filesystem:sql/migrations")) == [tmp_path / "project" / "sql" / "migrations"]
    assert _paths(resolver.resolve("filesystem:sql", base_dir=tmp_path / "caller")) == [tmp_path / "caller" / "sql"]


def test_bare_token_is_always_caller_relative(ctx, tmp_path: Path):
    resolver = LocationResolver(ctx, base_dir=tmp_path / "project")
    assert _paths(resolver.resolve("/db/sql")) == [tmp_path / "project" / "db" / "sql"]


@pytest.mark.parametrize("token", ["", "   "])
def test_blank_token_resolves_to_nothing(ctx, tmp_path: Path, token):
    assert LocationResolver(ctx, base_dir=tmp_path).resolve(token) == []


def test_resolve_all_deduplicates_in_order(ctx, tmp_path: Path):
    project = tmp_path / "project"
    resolver = LocationResolver(ctx, base_dir=project, resource_roots=[project / "res"])
    resolved = resolver.resolve_all(
        ["classpath:db", "filesystem:res/db", "classpath:db", "extra"]
    )
    assert _paths(resolved) == [project / "res" / "db", project / "extra"]
