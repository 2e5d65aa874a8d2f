"""Loading and writing the catalog document.

The whole file is parsed into one tomlkit document; edits happen in place on
that tree and serialising it reproduces every untouched byte.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.toml_document import TOMLDocument

from gvc.errors import CatalogError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def parse_catalog(text: str) -> TOMLDocument:
    """Parse catalog text.

    Raises:
        CatalogError: if the text is not valid TOML.
    """
    try:
        return tomlkit.parse(text)
    except TOMLKitError as exc:
        raise CatalogError(f"Failed to parse TOML: {exc}") from exc


def load_catalog(path: PathLike) -> TOMLDocument:
    """Read and parse the catalog at ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"Failed to read catalog: {exc}") from exc
    return parse_catalog(text)


def dump_catalog(doc: TOMLDocument) -> str:
    """Serialise the document, preserving formatting and comments."""
    return tomlkit.dumps(doc)


def save_catalog(path: PathLike, doc: TOMLDocument) -> None:
    """Atomically replace the catalog at ``path`` with ``doc``.

    The text goes to a temporary sibling first and is moved into place, so a
    failed write never leaves a truncated catalog behind.
    """
    target = Path(path)
    content = dump_catalog(doc)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    except OSError as exc:
        raise CatalogError(f"Failed to write catalog: {exc}") from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        if target.exists():
            os.chmod(tmp_name, target.stat().st_mode & 0o777)
        os.replace(tmp_name, target)
    except OSError as exc:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise CatalogError(f"Failed to write catalog: {exc}") from exc
    logger.debug("Catalog written to %s", target)
