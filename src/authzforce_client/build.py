"""Policy build step: authored XML in, PDP-ready XML out.

Every *.xml file directly inside the source directory is namespace
normalized (authoring prefix replaced by the XACML default namespace) and
pretty-printed into the build directory under the same name. The build
directory is emptied first, so it only ever holds the output of the latest
build.
"""

from __future__ import annotations

__all__ = [
    "build_policies",
]

import logging
import shutil
from pathlib import Path

from authzforce_client.constants import AUTHORING_NS_PREFIX
from authzforce_client.logging_setup import null_logger
from authzforce_client.xmltools.formatter import format_xml
from authzforce_client.xmltools.namespaces import normalize_namespace


def _clean_build_dir(src: Path, dest: Path) -> None:
    """Empty (or create) the build directory.

    Raises:
        ValueError: If dest is the source directory or contains it.
    """
    src_resolved = src.resolve()
    dest_resolved = dest.resolve()
    if dest_resolved == src_resolved or dest_resolved in src_resolved.parents:
        raise ValueError(f"Build directory {dest} must not contain source directory {src}")

    if dest.exists():
        shutil.rmtree(dest)
    dest.mkdir(parents=True)


def build_policies(
    src_dir: Path | str,
    build_dir: Path | str,
    logger: logging.Logger | None = None,
    prefix: str = AUTHORING_NS_PREFIX,
) -> list[Path]:
    """Normalize and format every policy in src_dir into build_dir.

    Args:
        src_dir: Directory holding authored policies.
        build_dir: Output directory (emptied before writing).
        logger: Progress output (default: discarded).
        prefix: Authoring namespace prefix to strip.

    Returns:
        Paths of the written files, sorted by name.

    Raises:
        FileNotFoundError: If src_dir does not exist.
        ValueError: If build_dir is src_dir or one of its parents, or a
            source file cannot be formatted.
    """
    log = logger or null_logger()
    src = Path(src_dir)
    dest = Path(build_dir)

    if not src.is_dir():
        raise FileNotFoundError(f"Source directory not found: {src}")

    _clean_build_dir(src, dest)
    log.debug(f"Cleaned build directory {dest}")

    sources = sorted(p for p in src.glob("*.xml") if p.is_file())
    if not sources:
        log.warning(f"No XML files found in {src}")
        return []

    written = []
    for source in sources:
        content = source.read_text(encoding="utf-8")
        try:
            output = format_xml(normalize_namespace(content, prefix=prefix))
        except ValueError as e:
            raise ValueError(f"Failed to format {source}: {e}") from e

        target = dest / source.name
        target.write_text(output, encoding="utf-8")
        written.append(target)
        log.info(f"Processed {source.name}")

    log.info(f"Built {len(written)} policy file(s) into {dest}")
    return written
