"""Writing generated modules to disk."""

import logging
import os
from typing import Iterable, List, Tuple

from .database.models import GeneratedOutput
from .errors import ValidationError

logger = logging.getLogger(__name__)

FILE_EXTENSION = ".ts"
TMP_SUFFIX = ".tmp"


def validate_output_dir(output_dir: str) -> str:
    """Return the stripped output directory, raising if it is empty."""
    out_dir = str(output_dir or "").strip()
    if out_dir == "":
        raise ValidationError("Output directory is required")
    return out_dir


def write_schema_file(output_dir: str, name: str, content: str) -> str:
    """Write one generated module to ``<output_dir>/<name>.ts``.

    Returns:
        Path of the written file
    """
    out_dir = validate_output_dir(output_dir)
    os.makedirs(out_dir, exist_ok=True)
    file_path = os.path.join(out_dir, f"{name}{FILE_EXTENSION}")
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(content)
    logger.debug("Wrote %s (%d chars)", file_path, len(content))
    return file_path


def write_outputs(output_dir: str, outputs: Iterable[GeneratedOutput]) -> List[str]:
    """Write every generated module and return the written paths.

    Modules are first written to ``.tmp`` files next to their targets and only
    moved into place once all of them were written, so a failed write leaves
    the output directory untouched.
    """
    out_dir = validate_output_dir(output_dir)
    os.makedirs(out_dir, exist_ok=True)

    staged: List[Tuple[str, str]] = []
    try:
        for output in outputs:
            file_path = os.path.join(out_dir, f"{output.name}{FILE_EXTENSION}")
            tmp_path = f"{file_path}{TMP_SUFFIX}"
            staged.append((tmp_path, file_path))
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(output.content)
    except OSError:
        logger.error("Writing generated modules to %s failed, discarding %d staged file(s)", out_dir, len(staged))
        for tmp_path, _ in staged:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        raise

    for tmp_path, file_path in staged:
        os.replace(tmp_path, file_path)
        logger.debug("Wrote %s", file_path)
    return [file_path for _, file_path in staged]
