from __future__ import annotations

from pathlib import Path

from ..errors import PreconditionError
from ..models import PatchArtifact


def discover_patches(directory: str | Path, suffix: str = ".patch") -> list[PatchArtifact]:
    directory = Path(directory)
    if not directory.is_dir():
        raise PreconditionError(f"Patch directory not found: {directory}")
    candidates = sorted(
        (path for path in directory.iterdir() if path.is_file() and path.name.endswith(suffix)),
        key=lambda path: path.name,
    )
    if not candidates:
        raise PreconditionError(f"No patch files found in {directory} (looking for *{suffix})")
    return [
        PatchArtifact(path=path.resolve(), name=path.name, position=index)
        for index, path in enumerate(candidates, start=1)
    ]
