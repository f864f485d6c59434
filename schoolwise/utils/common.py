import logging
import os
import string
import subprocess
import sys
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Characters kept verbatim in download filenames; everything else becomes "_"
SAFE_FILENAME_CHARS = frozenset(string.ascii_letters + string.digits)


def validate_file_path(file_path: Union[str, Path]) -> Optional[Path]:
    """
    Validate and resolve a file path.

    Args:
        file_path: Path to validate

    Returns:
        Resolved Path object or None if invalid
    """
    if not file_path:
        return None

    try:
        path_obj = Path(str(file_path)).expanduser().resolve()

        # Check if path is too long (Windows limit is 260 chars)
        if len(str(path_obj)) > 250:
            logger.warning(f"Path too long: {file_path}")
            return None

        return path_obj

    except (OSError, ValueError) as e:
        logger.error(f"Invalid path {file_path}: {e}")
        return None


def validate_directory_path(dir_path: Union[str, Path]) -> Optional[Path]:
    """
    Validate directory path and ensure it exists or can be created.

    Args:
        dir_path: Directory path to validate

    Returns:
        Validated Path object or None if invalid
    """
    validated_path = validate_file_path(dir_path)
    if not validated_path:
        return None

    try:
        validated_path.mkdir(parents=True, exist_ok=True)
        return validated_path

    except (PermissionError, OSError) as e:
        logger.error(f"Cannot create directory {validated_path}: {e}")
        return None


def sanitize_school_name(name: str) -> str:
    """
    Make a school name safe for use in a download filename.

    Every character that is not an ASCII letter or digit is replaced by a
    single underscore, one for one, so "School of Engineering" becomes
    "School_of_Engineering".
    """
    return "".join(ch if ch in SAFE_FILENAME_CHARS else "_" for ch in str(name))


def unique_path(directory: Union[str, Path], filename: str) -> Path:
    """
    Return ``directory / filename``, adding a " (n)" suffix if it is taken.

    Mirrors what browsers do for repeated downloads of the same file.
    """
    directory = Path(directory)
    candidate = directory / filename
    if not candidate.exists():
        return candidate

    stem, ext = os.path.splitext(filename)
    counter = 1
    while True:
        candidate = directory / f"{stem} ({counter}){ext}"
        if not candidate.exists():
            return candidate
        counter += 1


def open_file_externally(file_path: str) -> bool:
    """Open a file or folder with the default application (cross-platform)."""
    try:
        file_path_obj = Path(file_path).resolve()
        if not file_path_obj.exists():
            logger.error(f"File does not exist: {file_path_obj}")
            return False
        if os.name == 'nt':
            os.startfile(str(file_path_obj))
        elif os.name == 'posix':
            subprocess.call(['open' if sys.platform == 'darwin' else 'xdg-open', str(file_path_obj)])
        else:
            logger.warning(f"Unsupported OS for auto-opening files: {os.name}")
            return False
        logger.info(f"Opened file: {file_path_obj}")
        return True
    except Exception as e:
        logger.error(f"Error opening file {file_path}: {e}")
        return False
