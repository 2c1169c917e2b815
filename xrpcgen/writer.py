"""File writer for generation results."""
from pathlib import Path
from typing import List, Union

from xrpcgen.framework.types import GeneratedFile


def write_files(files: List[GeneratedFile], out_dir: Union[str, Path]) -> List[Path]:
    """
    Write generated files to the output directory.

    Args:
        files: List of GeneratedFile objects to write
        out_dir: Base output directory path

    Returns:
        The paths written, in the order given
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for file in files:
        file_path = out_dir / file.path
        # Create parent directories if needed
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(file.content, encoding="utf-8")
        written.append(file_path)
    return written
