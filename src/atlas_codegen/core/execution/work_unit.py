# src/atlas_codegen/core/execution/work_unit.py
"""
WorkUnitRunner — execução de uma unidade de trabalho dentro dos seus escopos.

Sequência:
    1. abre o escopo de classpath (ClassLoading.acquire)
    2. verifica que o driver é carregável (DriverUnavailableError)
    3. sobe o database temporário (ContainerProvisioner.start_container)
    4. executa as migrações com os settings efetivos
    5. para unidades `generate`, invoca o gerador
    6. libera container e escopo de classpath em todo caminho de saída

Falhas dos colaboradores de migração/geração são encapsuladas em
WorkUnitExecutionError (com a causa encadeada); exceções tipadas do
Atlas Codegen propagam como estão.
"""

from __future__ import annotations

from atlas_codegen.core.exceptions import (
    CodegenException,
    DriverUnavailableError,
    WorkUnitExecutionError,
)
from atlas_codegen.core.model.context import EffectiveContext, WorkUnit, WorkUnitKind
from atlas_codegen.core.run_context import RunContext

from .collaborators import Collaborators
from .provisioning import determine_container_image


SCOPE = "execution"


class WorkUnitRunner:
    def __init__(self, ctx: RunContext, collaborators: Collaborators):
        self.ctx = ctx
        self.collaborators = collaborators

    def run(self, unit: WorkUnit, context: EffectiveContext) -> None:
        c = self.collaborators
        driver = context.driver_class_name
        image = context.container_image or determine_container_image(driver)

        loader = c.class_loading.acquire()
        try:
            if not c.class_loading.is_class_loadable(driver, loader):
                raise DriverUnavailableError(
                    message=(
                        f"Driver '{driver}' is not available on the classpath of unit "
                        f"'{unit.name}' for {unit.schema_key.describe()}"
                    ),
                    details={"unit": unit.name, "driver": driver, "database": context.database_name},
                    hint="Adicione o driver JDBC às dependências de runtime do gerador.",
                )

            self.ctx.log(scope=SCOPE, level="INFO", message=f"starting container {image}", unit=unit.name)
            container = c.provisioner.start_container(driver, image)
            try:
                self._call(
                    unit,
                    "migrate",
                    c.migrations.run_migrations,
                    container.jdbc_url,
                    container.username,
                    container.password,
                    dict(context.settings_snapshot),
                )
                if unit.kind == WorkUnitKind.GENERATE:
                    self._call(
                        unit,
                        "generate",
                        c.generator.generate,
                        unit.target_name,
                        container.jdbc_url,
                        container.username,
                        container.password,
                        context.schema_name,
                        context.exclude_pattern,
                    )
            finally:
                container.close()
                self.ctx.log(scope=SCOPE, level="DEBUG", message="container released", unit=unit.name)
        finally:
            c.class_loading.release(loader)

    def _call(self, unit: WorkUnit, phase: str, fn, *args) -> None:
        try:
            fn(*args)
        except CodegenException:
            raise
        except Exception as e:
            raise WorkUnitExecutionError(
                message=f"{phase} failed for unit '{unit.name}' ({unit.schema_key.describe()}): {e}",
                details={
                    "unit": unit.name,
                    "phase": phase,
                    "database": unit.schema_key.database,
                    "schema": unit.schema_key.schema,
                    "target": unit.target_name,
                    "exc_type": e.__class__.__name__,
                },
                hint="Verifique a saída da ferramenta de migração/geração.",
            ) from e
        self.ctx.log(scope=SCOPE, level="INFO", message=f"{phase} completed", unit=unit.name)
