"""Escritura y extracción de los archivos tar.gz que devuelve el servicio."""

from __future__ import annotations

import io
import logging
import tarfile
from pathlib import Path

from core.domain.models import DownloadedArchive
from core.errors import ArchiveError


logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".tar.gz"


def archive_stem(filename: str) -> str:
    return filename.removesuffix(ARCHIVE_SUFFIX).removesuffix(".tgz")


def save_archive(*, archive: DownloadedArchive, output: Path, default_name: str) -> Path:
    """Guarda el archivo tal cual.

    Si `output` es un directorio (o una ruta inexistente sin extensión) el archivo
    se escribe dentro con el nombre sugerido por el servidor o `default_name`.
    """

    if output.is_dir() or (not output.exists() and not output.suffix):
        dest = output / Path(archive.filename or default_name).name
    else:
        dest = output

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(archive.content)
    except OSError as exc:
        raise ArchiveError(f"Failed writing sdk archive to {dest}", debug=exc) from exc

    logger.debug("Wrote %d bytes to %s", archive.size, dest)
    return dest


def unpack_archive(*, archive: DownloadedArchive, dest: Path) -> Path:
    """Extrae un tar.gz en `dest` y devuelve el directorio raíz del SDK extraído.

    El filtro `data` de `tarfile` vuelve relativas las rutas absolutas y rechaza
    los miembros que escaparían de `dest` (`..`, links hacia afuera).
    """

    logger.debug("Unpacking sdk to %s: %d bytes", dest, archive.size)
    try:
        dest.mkdir(parents=True, exist_ok=True)
        with tarfile.open(fileobj=io.BytesIO(archive.content), mode="r:gz") as tar:
            tar.extractall(dest, filter="data")
    except (tarfile.TarError, EOFError, OSError) as exc:
        raise ArchiveError("Failed unpacking sdk archive into output", debug=exc) from exc

    if archive.filename:
        return dest / archive_stem(Path(archive.filename).name)
    return dest


def tar_directory(*, source: Path, into: Path) -> Path:
    """Empaqueta el contenido de `source` (con `.` como raíz) en un tar.gz."""

    logger.debug("Tarring %s into %s...", source, into)
    try:
        with tarfile.open(into, mode="w:gz") as tar:
            tar.add(source, arcname=".")
    except (tarfile.TarError, OSError) as exc:
        raise ArchiveError(f"Failed archiving {source}", debug=exc) from exc
    logger.debug("Tar complete: %d bytes", into.stat().st_size)
    return into
