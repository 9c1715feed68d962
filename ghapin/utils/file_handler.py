"""
file_handler.py - Utilities for file operations

This module provides file handling utilities for ghapin: reading workflow
files without newline translation, backups, and atomic writes.
"""

import logging
import os
import shutil
import tempfile

logger = logging.getLogger(__name__)


def read_text_file(file_path: str) -> str:
    """
    Read a text file exactly as stored

    Line endings are not translated, so CRLF files round-trip unchanged.

    Args:
        file_path: Path to the file

    Returns:
        File content

    Raises:
        OSError: If the file cannot be read
    """
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def create_file_backup(file_path: str, suffix: str = ".bak") -> str:
    """
    Create a backup of a file

    Args:
        file_path: Path to the file to backup
        suffix: Suffix to append to the backup file name

    Returns:
        Path to the backup file

    Raises:
        FileNotFoundError: If the source file doesn't exist
    """
    backup_path = f"{file_path}{suffix}"

    shutil.copy2(file_path, backup_path)

    return backup_path


def restore_from_backup(backup_path: str, original_path: str) -> bool:
    """
    Restore a file from backup

    Args:
        backup_path: Path to the backup file
        original_path: Path to restore to

    Returns:
        True if successful, False if there is no backup
    """
    if not os.path.exists(backup_path):
        return False

    shutil.copy2(backup_path, original_path)

    return True


def safe_write_file(file_path: str, content: str, create_backup: bool = False) -> bool:
    """
    Safely write content to a file

    The content is written to a temporary file in the same directory which
    then replaces the original, keeping its permission bits.

    Args:
        file_path: Path to the file to write
        content: Content to write
        create_backup: Whether to keep a ``.bak`` copy of the original file

    Returns:
        True if successful, False otherwise
    """
    backup_path = None
    if create_backup and os.path.exists(file_path):
        backup_path = create_file_backup(file_path)

    directory = os.path.dirname(os.path.abspath(file_path))
    try:
        os.makedirs(directory, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".ghapin-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)

            if os.path.exists(file_path):
                shutil.copymode(file_path, temp_path)

            os.replace(temp_path, file_path)
            return True
        finally:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
    except OSError as e:
        logger.error("Failed to write file %s: %s", file_path, e)

        if backup_path:
            restore_from_backup(backup_path, file_path)

        return False
