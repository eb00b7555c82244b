# src/atlas_codegen/core/resolution/locations.py
"""
LocationResolver — tokens de location → referências concretas de recursos.

Gramática do token:

    ("classpath:" | "filesystem:")? <path>

    - classpath:<relativo>  → raízes de recursos do projeto + classpath externo
    - filesystem:<path>     → absoluto como está; relativo contra o base dir
    - <path> (sem prefixo)  → sempre relativo ao base dir do chamador

Algoritmo classpath:
    1. Remove o prefixo e separadores iniciais
    2. Para cada raiz de recursos, adiciona `raiz/relativo` incondicionalmente
       (a existência é verificada pelo chamador; arquivos *futuros* também
       participam da invalidação de cache)
    3. Percorre o classpath externo (entradas fora do projeto):
         - diretório → `entrada/relativo`, se existir
         - .jar/.zip → o próprio archive, se a listagem contiver `relativo`,
           `relativo/` ou qualquer entrada com prefixo `relativo/`
    4. União deduplicada, preservando a ordem de inserção

Falhas de leitura de archive não são fatais: viram ArchiveInspectionWarning
e o archive é tratado como "não contém a location".

Limites explícitos:
    - Não lê nem valida conteúdo de scripts
    - Não implementa formato de archive próprio (apenas listagem zip)
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from atlas_codegen.core.exceptions import ArchiveInspectionWarning
from atlas_codegen.core.model.context import LocationKind, ResolvedLocation
from atlas_codegen.core.run_context import RunContext

from .values import trim_leading_separators


CLASSPATH_PREFIX = "classpath:"
FILESYSTEM_PREFIX = "filesystem:"
ARCHIVE_SUFFIXES = (".jar", ".zip")

DEFAULT_RESOURCE_ROOTS = ("src/main/resources", "build/resources/main")

SCOPE = "locations"


def default_resource_roots(base_dir: Path) -> List[Path]:
    return [base_dir / rel for rel in DEFAULT_RESOURCE_ROOTS]


class LocationResolver:
    """Resolve tokens de location para um projeto (base dir + raízes + classpath)."""

    def __init__(
        self,
        ctx: RunContext,
        *,
        base_dir: Path,
        resource_roots: Optional[Sequence[Path]] = None,
        runtime_classpath: Optional[Sequence[Path]] = None,
    ):
        self.ctx = ctx
        self.base_dir = Path(base_dir)
        roots = list(resource_roots or ())
        self.resource_roots: List[Path] = roots or default_resource_roots(self.base_dir)
        self.runtime_classpath: List[Path] = [Path(p) for p in runtime_classpath or ()]

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------
    def resolve(self, token: str, base_dir: Optional[Path] = None) -> List[ResolvedLocation]:
        location = (token or "").strip()
        if not location:
            return []

        caller_dir = Path(base_dir) if base_dir is not None else self.base_dir

        if location.startswith(CLASSPATH_PREFIX):
            relative = trim_leading_separators(location[len(CLASSPATH_PREFIX):])
            return self._resolve_classpath(relative, token=location)

        if location.startswith(FILESYSTEM_PREFIX):
            path = Path(location[len(FILESYSTEM_PREFIX):]).expanduser()
            if not path.is_absolute():
                path = caller_dir / path
            return [ResolvedLocation(path=path, kind=LocationKind.FILESYSTEM, token=location)]

        bare = trim_leading_separators(location)
        return [ResolvedLocation(path=caller_dir / bare, kind=LocationKind.FILESYSTEM, token=location)]

    def resolve_all(
        self, tokens: Iterable[str], base_dir: Optional[Path] = None
    ) -> List[ResolvedLocation]:
        """União deduplicada (por path) das resoluções de cada token, em ordem."""
        resolved: List[ResolvedLocation] = []
        seen = set()
        for token in tokens:
            for location in self.resolve(token, base_dir):
                if location.path in seen:
                    continue
                seen.add(location.path)
                resolved.append(location)
        return resolved

    # ------------------------------------------------------------------
    # classpath:
    # ------------------------------------------------------------------
    def _resolve_classpath(self, relative: str, *, token: str) -> List[ResolvedLocation]:
        resolved: List[ResolvedLocation] = [
            ResolvedLocation(path=_join(root, relative), kind=LocationKind.RESOURCE_ROOT, token=token)
            for root in self.resource_roots
        ]

        entry_path = relative.replace("\\", "/")
        project = self.base_dir.absolute()
        for entry in self.runtime_classpath:
            if not entry.exists() or _is_under(entry, project):
                continue
            if entry.is_dir():
                candidate = _join(entry, relative)
                if candidate.exists():
                    resolved.append(
                        ResolvedLocation(path=candidate, kind=LocationKind.CLASSPATH_DIRECTORY, token=token)
                    )
                continue
            if _is_archive(entry) and self._archive_contains(entry, entry_path):
                resolved.append(ResolvedLocation(path=entry, kind=LocationKind.ARCHIVE, token=token))

        out: List[ResolvedLocation] = []
        seen = set()
        for location in resolved:
            if location.path not in seen:
                seen.add(location.path)
                out.append(location)
        return out

    def _archive_contains(self, archive: Path, entry_path: str) -> bool:
        if not entry_path:
            return True
        prefix = entry_path if entry_path.endswith("/") else entry_path + "/"
        try:
            with zipfile.ZipFile(archive) as zf:
                return any(
                    name == entry_path or name == prefix or name.startswith(prefix)
                    for name in zf.namelist()
                )
        except (zipfile.BadZipFile, OSError) as e:
            self.ctx.warn(
                ArchiveInspectionWarning(
                    message=(
                        f"Unable to inspect classpath entry '{archive}' for location "
                        f"'{entry_path}': {e}"
                    ),
                    details={"archive": str(archive), "location": entry_path, "error": str(e)},
                )
            )
            return False


def _join(root: Path, relative: str) -> Path:
    if not relative:
        return root
    return root.joinpath(*[p for p in relative.replace("\\", "/").split("/") if p])


def _is_archive(entry: Path) -> bool:
    return entry.name.lower().endswith(ARCHIVE_SUFFIXES)


def _is_under(entry: Path, project: Path) -> bool:
    try:
        entry.absolute().relative_to(project)
        return True
    except ValueError:
        return False
