# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Codegen.

Este módulo define fixtures reutilizáveis que fornecem:
- RunContext isolado por teste
- árvores de projeto temporárias (tmp_path) com raízes de recursos
- construtor de archives .jar/.zip para o classpath externo
- colaboradores externos falsos (classpath, container, migração, geração)

Decisões arquiteturais:
    - Colaboradores falsos usam duck typing em vez de herança
    - Toda chamada a colaborador é registrada para asserts posteriores
    - Imports do core são realizados de forma lazy dentro das fixtures

Invariantes:
    - Nenhuma fixture sobe database real ou executa migração real
    - Todo I/O acontece sob tmp_path

Limites explícitos:
    - Não substituir testes de integração com colaboradores reais
"""

import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


# =====================================================
# RunContext / Settings
# =====================================================

@pytest.fixture
def ctx():
    from atlas_codegen.core.run_context import RunContext

    return RunContext.new(config={"engine": {"fail_fast": True}})


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Projeto com `src/main/resources/db/migration/V1__init.sql`."""
    root = tmp_path / "project"
    migrations = root / "src" / "main" / "resources" / "db" / "migration"
    migrations.mkdir(parents=True)
    (migrations / "V1__init.sql").write_text("create table person(id int);\n", encoding="utf-8")
    return root


@pytest.fixture
def make_archive(tmp_path: Path):
    """Factory: cria um archive fora do projeto com as entradas informadas."""
    libs = tmp_path / "libs"
    libs.mkdir(exist_ok=True)

    def _make(name: str, entries: Dict[str, str]) -> Path:
        path = libs / name
        with zipfile.ZipFile(path, "w") as zf:
            for entry, content in entries.items():
                zf.writestr(entry, content)
        return path

    return _make


@pytest.fixture
def settings_for(project_dir: Path):
    """Factory: Settings com base_dir no projeto temporário."""
    from atlas_codegen.core.config.settings import Settings

    def _settings(**project: Any):
        config = {"project": {"base_dir": str(project_dir)}}
        config["project"].update({k: [str(p) for p in v] for k, v in project.items()})
        return Settings.from_config(config)

    return _settings


# =====================================================
# Colaboradores externos falsos
# =====================================================

class FakeContainer:
    def __init__(self, driver_class: str, image: Optional[str], log: List[tuple]):
        self.jdbc_url = f"jdbc:fake://{image}/test"
        self.username = "test"
        self.password = "secret"
        self.driver_class = driver_class
        self._log = log
        self.closed = False

    def close(self) -> None:
        self.closed = True
        self._log.append(("container.close", self.driver_class))


class FakeCollaborators:
    """Conjunto de colaboradores falsos com registro de chamadas em ordem."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.loadable = True
        self.fail_migrations_with: Optional[Exception] = None
        self.fail_generation_with: Optional[Exception] = None
        self.containers: List[FakeContainer] = []
        self.migration_settings: List[Dict[str, Any]] = []
        self.generated: List[Dict[str, Any]] = []

    # ClassLoading
    def acquire(self):
        self.calls.append(("loader.acquire",))
        return object()

    def is_class_loadable(self, name: str, loader: Any) -> bool:
        self.calls.append(("loader.check", name))
        return self.loadable

    def release(self, loader: Any) -> None:
        self.calls.append(("loader.release",))

    # ContainerProvisioner
    def start_container(self, driver_class: str, image_override: Optional[str]):
        self.calls.append(("container.start", driver_class, image_override))
        container = FakeContainer(driver_class, image_override, self.calls)
        self.containers.append(container)
        return container

    # MigrationRunner
    def run_migrations(self, jdbc_url, username, password, effective_settings):
        self.calls.append(("migrate", jdbc_url))
        self.migration_settings.append(effective_settings)
        if self.fail_migrations_with is not None:
            raise self.fail_migrations_with

    # CodeGenerator
    def generate(self, target_name, jdbc_url, username, password, schema, exclude_pattern):
        self.calls.append(("generate", target_name))
        self.generated.append(
            {"target": target_name, "schema": schema, "exclude_pattern": exclude_pattern}
        )
        if self.fail_generation_with is not None:
            raise self.fail_generation_with

    def as_collaborators(self):
        from atlas_codegen.core.execution.collaborators import Collaborators

        return Collaborators(
            class_loading=self,
            provisioner=self,
            migrations=self,
            generator=self,
        )


@pytest.fixture
def fakes() -> FakeCollaborators:
    return FakeCollaborators()
