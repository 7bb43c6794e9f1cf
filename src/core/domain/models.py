"""Modelos del dominio (Pydantic v2).

Dos familias:
- Requests: lo que la CLI envía al servicio de generación (formularios multipart).
- Entidades: lo que el servicio devuelve (APIs, proyectos de docs, deployments...).

Nota:
- Estos modelos describen *qué* se envía/recibe, no *cómo* viaja por HTTP.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.language import SdkLanguage


SPEC_EXTENSIONS: tuple[str, ...] = ("json", "yaml", "yml")
VERSION_BUMPS: tuple[str, ...] = ("patch", "minor", "major", "rc")


class StatelessGenerateRequest(BaseModel):
    """Generación "stateless": un spec OpenAPI suelto, sin config ni API registrada."""

    extension: str = Field(
        ...,
        description="Extensión del spec sin punto (json, yaml, yml).",
    )
    language: SdkLanguage = Field(
        ...,
        description="Lenguaje del SDK a generar.",
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=256,
        description="Nombre visible del spec/SDK.",
    )
    file: bytes = Field(
        ...,
        repr=False,
        description="Contenido crudo del spec OpenAPI.",
    )

    @classmethod
    def from_path(cls, path: Path, *, language: SdkLanguage, name: str | None = None) -> "StatelessGenerateRequest":
        extension = path.suffix.lstrip(".").lower()
        if extension not in SPEC_EXTENSIONS:
            raise ValueError(f"Unsupported spec extension `{path.suffix}`, expected one of {list(SPEC_EXTENSIONS)}")
        return cls(
            extension=extension,
            language=language,
            name=name or path.stem,
            file=path.read_bytes(),
        )


class SdkGenerateRequest(BaseModel):
    """Generación a partir de un config de SDK (YAML) de una API registrada."""

    config: Path = Field(..., description="Ruta al config YAML del SDK.")
    language: SdkLanguage
    sdk_version: str = Field(default="0.1.0", description="Versión semántica del SDK generado.")
    api_version: str = Field(default="latest", description="Versión de la API listada en el config.")
    github_actions: bool = Field(
        default=False,
        description="Incluir GitHub Actions de test/publicación en el SDK.",
    )


class SdkUpdateRequest(BaseModel):
    """Actualización de un SDK existente: el servicio responde con un git patch."""

    config: Path
    prev_sdk_git: Path = Field(..., description="tar.gz del directorio .git del repo del SDK.")
    prev_sdk_id: str = Field(..., min_length=1, description="ID del SDK leído de .sdk.json.")
    sdk_version: str = Field(..., description="Semver explícito o bump (patch/minor/major/rc).")
    api_version: str = Field(default="latest")


class SdkMetadata(BaseModel):
    """Contenido de `.sdk.json` en la raíz de un SDK generado."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)


class DownloadedArchive(BaseModel):
    """Archivo binario devuelto por el servicio (tar.gz)."""

    content: bytes = Field(..., repr=False)
    filename: str | None = Field(
        default=None,
        description="Nombre sugerido por el header Content-Disposition, si existe.",
    )

    @property
    def size(self) -> int:
        return len(self.content)


class Api(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    version_count: int = Field(default=0, ge=0)
    url: str | None = Field(default=None, description="URL pública de la API en Sideko.")
    created_at: str = ""


class DocProject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    title: str = ""
    current_version: str | None = None
    preview_domain: str | None = None
    production_domain: str | None = None
    created_at: str = ""


class DeploymentStatus(str, Enum):
    GENERATED = "Generated"
    BUILDING = "Building"
    COMPLETE = "Complete"
    ERROR = "Error"
    CANCELLED = "Cancelled"

    def is_terminal(self) -> bool:
        return self in (DeploymentStatus.COMPLETE, DeploymentStatus.ERROR, DeploymentStatus.CANCELLED)


class DeploymentTarget(str, Enum):
    PREVIEW = "Preview"
    PRODUCTION = "Production"


class Deployment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    status: DeploymentStatus
    target: DeploymentTarget = DeploymentTarget.PREVIEW
    created_at: str = ""


class CliUpdateSeverity(str, Enum):
    INFO = "info"
    SUGGESTED = "suggested"
    REQUIRED = "required"


class CliUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    severity: CliUpdateSeverity = CliUpdateSeverity.INFO
    message: str


class LoginUrl(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str = Field(..., min_length=1)
