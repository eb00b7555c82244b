"""
E2E — Atlas Codegen

Valida o core de ponta a ponta com colaboradores falsos:
- settings de run (defaults + local YAML)
- declarações incrementais (database, schema, claims, targets)
- registro/desabilitação de unidades de trabalho
- contexto efetivo, fingerprint e chave de cache
- execução com fail_fast e payloads de erro

Requisitos:
- pytest -q (nenhum database real, nenhuma migração real)
"""

from __future__ import annotations

from pathlib import Path

import pytest

from atlas_codegen import CodegenSession
from atlas_codegen.core.exceptions import (
    DuplicateTargetClaimError,
    DuplicateWorkUnitError,
    MissingDriverError,
    SchemaMismatchError,
    UnresolvedTargetError,
)
from atlas_codegen.core.execution import UnitStatus
from atlas_codegen.core.model import MigrationSettings, SchemaKey


FIXTURES = Path(__file__).parents[1] / "fixtures" / "config"

PUBLIC = SchemaKey("db1", "public")


@pytest.fixture
def session(settings_for, fakes, make_archive):
    archive = make_archive("shared-migrations.jar", {"db/migration/V0__base.sql": "select 1;"})
    s = CodegenSession(
        settings=settings_for(runtime_classpath=[archive]),
        collaborators=fakes.as_collaborators(),
    )
    s.archive = archive
    yield s
    s.close()


def _declare_public(session, *claims, **migration):
    session.declare_database("db1", driver="org.postgresql.Driver")
    migration.setdefault("default_schema", "public")
    return session.declare_schema("db1", "public", MigrationSettings(**migration), claims=list(claims))


def test_full_flow(session, fakes, project_dir: Path):
    public = _declare_public(session, "main")
    assert session.work_units() == ()

    session.register_target("main", input_schema="PUBLIC", excludes="tmp_.*")
    assert [u.name for u in session.work_units()] == [
        "generateMainDatabaseClasses",
        "migrateDatabaseSchema",
    ]

    context = session.resolve_effective_context(public, target_name="main")
    assert context.schema_name == "public"
    assert context.driver_class_name == "org.postgresql.Driver"
    assert context.container_image == "postgres:17-alpine"
    assert context.exclude_pattern.startswith("tmp_.*|")
    assert [loc.path for loc in context.migration_locations] == [
        project_dir / "src" / "main" / "resources" / "db" / "migration",
        project_dir / "build" / "resources" / "main" / "db" / "migration",
        session.archive,
    ]

    result = session.execute()

    assert result.ok
    assert [r.status for r in result.units.values()] == [UnitStatus.SUCCESS, UnitStatus.SUCCESS]
    assert fakes.generated == [
        {"target": "main", "schema": "public", "exclude_pattern": context.exclude_pattern}
    ]
    assert len(fakes.migration_settings) == 2
    assert fakes.migration_settings[0]["default_schema"] == "public"
    assert all(c.closed for c in fakes.containers)


def test_cache_key_tracks_migration_content(session, project_dir: Path):
    public = _declare_public(session, "main")
    session.register_target("main")
    context = session.resolve_effective_context(public, target_name="main")

    key = session.cache_key(context)
    assert session.cache_key(session.resolve_effective_context(public, target_name="main")) == key

    migrations = project_dir / "src" / "main" / "resources" / "db" / "migration"
    (migrations / "V2__more.sql").write_text("alter table person add name text;\n", encoding="utf-8")
    changed = session.cache_key(context)
    assert changed != key

    future = project_dir / "build" / "resources" / "main" / "db" / "migration"
    future.mkdir(parents=True)
    assert session.cache_key(context) != changed


def test_fingerprint_follows_redeclaration(session):
    public = _declare_public(session, "main")
    session.register_target("main")
    before = session.compute_fingerprint(session.resolve_effective_context(public, target_name="main"))

    session.declare_schema("db1", "public", MigrationSettings(placeholders={"owner": "app"}))
    after = session.compute_fingerprint(session.resolve_effective_context(public, target_name="main"))

    assert before != after
    assert "placeholders={owner:app}" in after
    warnings = [e for e in session.ctx.events_for("declarations") if e["level"] == "WARNING"]
    assert len(warnings) == 1


def test_declare_schema_accepts_plain_mapping(session):
    public = _declare_public(session, "main")
    session.register_target("main")

    session.declare_schema("db1", "public", {"placeholders": {"owner": "app"}})
    fingerprint = session.compute_fingerprint(session.resolve_effective_context(public, target_name="main"))
    assert "placeholders={owner:app}" in fingerprint

    with pytest.raises(ValueError):
        session.declare_schema("db1", "public", {"bogus": 1})


def test_blank_redeclaration_keeps_earlier_values(session):
    session.declare_database("db1", driver="org.postgresql.Driver")
    public = session.declare_schema(
        "db1", "public", {"locations": ["filesystem:sql"], "default_schema": "app"}, claims=["main"]
    )
    session.register_target("main")

    session.declare_schema("db1", "public", {"locations": [], "default_schema": "  "})

    context = session.resolve_effective_context(public, target_name="main")
    assert context.schema_name == "app"
    assert context.settings_snapshot["locations"] == ["filesystem:sql"]


def test_targets_differing_only_in_case_are_rejected(session):
    session.declare_database("db1", driver="org.postgresql.Driver")
    session.declare_schema("db1", "a", claims=["foo"])
    session.register_target("foo")
    session.register_target("FOO")

    with pytest.raises(DuplicateWorkUnitError) as exc:
        session.declare_schema("db1", "b", claims=["FOO"])

    message = str(exc.value)
    assert "'foo'" in message
    assert "'FOO'" in message
    assert exc.value.code == "DUPLICATE_WORK_UNIT"
    assert {(u.schema_key, u.target_name) for u in session.work_units()} == {(SchemaKey("db1", "a"), "foo")}
    assert session.reconciler.owner_of("FOO") is None
    assert session.reconciler.claims_of(SchemaKey("db1", "b")) == ()


def test_withdrawn_unit_name_can_be_reused_by_another_binding(session):
    session.declare_database("db1", driver="org.postgresql.Driver")
    a = session.declare_schema("db1", "a", claims=["foo"])
    session.register_target("foo")
    session.register_target("FOO")
    session.claim_targets(a, [])

    session.declare_schema("db1", "b", claims=["FOO"])
    session.claim_targets(a, [])

    units = session.work_units()
    assert len(units) == 2
    assert all(u.enabled and u.schema_key == SchemaKey("db1", "b") for u in units)


def test_withdrawn_claim_disables_units(session, fakes):
    public = _declare_public(session, "main", "reporting")
    session.register_target("main")
    session.register_target("reporting")
    assert len(session.work_units()) == 4

    session.claim_targets(public, ["main"])

    assert session.work_unit("generateReportingDatabaseClasses").enabled is False
    assert session.work_unit("migrateReportingDatabaseSchema").enabled is False
    assert session.work_unit("generateMainDatabaseClasses").enabled is True

    result = session.execute()
    assert result.units["generateReportingDatabaseClasses"].status == UnitStatus.SKIPPED
    assert result.units["migrateDatabaseSchema"].status == UnitStatus.SUCCESS
    assert [g["target"] for g in fakes.generated] == ["main"]


def test_duplicate_claim_between_schemas(session):
    _declare_public(session, "main")
    session.declare_schema("db1", "audit")

    with pytest.raises(DuplicateTargetClaimError):
        session.add_claims(("db1", "audit"), "main")


def test_unresolved_target_blocks_execution(session, fakes):
    _declare_public(session, "ghost")

    with pytest.raises(UnresolvedTargetError):
        session.execute()
    assert fakes.calls == []


def test_schema_mismatch_aborts_before_any_collaborator(session, fakes):
    _declare_public(session, "main")
    session.register_target("main", input_schema="other")

    with pytest.raises(SchemaMismatchError):
        session.execute()
    assert fakes.calls == []


def test_missing_driver(settings_for, fakes):
    session = CodegenSession(settings=settings_for(), collaborators=fakes.as_collaborators())
    public = session.declare_schema("db1", "public", claims=["main"])
    session.register_target("main")

    with pytest.raises(MissingDriverError):
        session.resolve_effective_context(public, target_name="main")


def test_unsupported_driver_fails_only_at_execution(settings_for, fakes):
    session = CodegenSession(settings=settings_for(), collaborators=fakes.as_collaborators())
    session.declare_database("db1", driver="org.h2.Driver")
    public = session.declare_schema("db1", "public", claims=["main"])
    session.register_target("main")

    context = session.resolve_effective_context(public, target_name="main")
    assert context.container_image is None
    assert session.ctx.warnings["fingerprint"]

    result = session.execute()
    assert not result.ok
    assert result.units["generateMainDatabaseClasses"].payload["error"]["type"] == "UNSUPPORTED_DRIVER"
    assert fakes.calls == []


def test_from_files_applies_local_overrides(project_dir: Path, fakes):
    session = CodegenSession.from_files(
        defaults_path=str(FIXTURES / "codegen_defaults.yaml"),
        local_path=str(FIXTURES / "codegen_local.yaml"),
        base_dir=project_dir,
        collaborators=fakes.as_collaborators(),
    )
    assert session.settings.fail_fast is False
    [event] = session.ctx.events_for("session")
    assert len(event["config_hash"]) == 64

    _declare_public(session, "main")
    session.register_target("main")
    fakes.fail_migrations_with = RuntimeError("connection refused")

    result = session.execute()

    assert [r.status for r in result.units.values()] == [UnitStatus.FAILED, UnitStatus.FAILED]
    assert ("container.start", "org.postgresql.Driver", "registry.local/postgres:17") in fakes.calls
    assert fakes.calls.count(("loader.release",)) == 2


def test_closed_session_rejects_declarations(session):
    session.close()
    with pytest.raises(RuntimeError):
        session.declare_database("db2")
