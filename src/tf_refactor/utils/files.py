"""Discovery and write-back of Terraform files."""

import logging
from pathlib import Path

from tf_refactor.models import ChangeRecord, SourceFile

logger = logging.getLogger(__name__)

TERRAFORM_SUFFIX = ".tf"


def discover_tf_files(directory: str | Path) -> list[SourceFile]:
    """Read every ``*.tf`` file directly inside ``directory``.

    Subdirectories are not searched. Files are returned sorted by name.

    Args:
        directory: Directory to scan.

    Returns:
        List of SourceFile objects; empty if the directory cannot be read
        or holds no Terraform files.
    """
    root = Path(directory)
    logger.debug("Reading Terraform files from directory: %s", root)

    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        logger.error("Error reading files from %s: %s", root, exc)
        return []

    files: list[SourceFile] = []
    for entry in entries:
        if not entry.is_file() or not entry.name.endswith(TERRAFORM_SUFFIX):
            continue
        try:
            content = entry.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable file %s: %s", entry, exc)
            continue
        logger.debug("Reading file: %s", entry)
        files.append(SourceFile(path=str(entry), content=content))

    if not files:
        logger.info("No Terraform files found in %s", root)

    return files


def write_source_files(
    files: list[SourceFile],
    records: list[ChangeRecord],
) -> list[Path]:
    """Write accepted files back to disk.

    A file that cannot be written is logged as a warning and skipped; the
    remaining files are still written.

    Args:
        files: Final file states from a session.
        records: Change records from the same session.

    Returns:
        Paths that were written.
    """
    accepted = {record.source_path for record in records if record.accepted}
    written: list[Path] = []
    for source_file in files:
        if source_file.path not in accepted:
            continue
        path = Path(source_file.path)
        try:
            path.write_text(source_file.content, encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write changes to %s: %s", path, exc)
            continue
        logger.debug("Wrote %s", path)
        written.append(path)
    return written
