# basepaint_tools/artifacts.py
from __future__ import annotations

from pathlib import Path
from typing import List, Union

from .utils import debug_log

"""
Artifact emission: write named text/bytes outputs into one directory.
"""


class ArtifactWriter:
    """Callable emit(filename, content) that writes into outdir."""

    def __init__(self, outdir: Path, debug: bool = False) -> None:
        self.outdir = Path(outdir)
        self.debug = debug
        self.written: List[Path] = []

    def __call__(self, filename: str, content: Union[str, bytes]) -> Path:
        return self.write(filename, content)

    def write(self, filename: str, content: Union[str, bytes]) -> Path:
        if Path(filename).name != filename:
            raise ValueError(f"artifact name must be a bare filename: {filename!r}")
        self.outdir.mkdir(parents=True, exist_ok=True)
        path = self.outdir / filename
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        self.written.append(path)
        if self.debug:
            debug_log(f"wrote {path}")
        return path


__all__ = ["ArtifactWriter"]
