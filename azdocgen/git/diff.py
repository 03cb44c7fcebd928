"""Reduce changed-file records to the diffs the prompt builder consumes."""

from __future__ import annotations

from typing import Iterable, List

from ..models import ChangedFile, FileDiff

REMOVED_PLACEHOLDER = "(File removed)"
NO_PATCH_PLACEHOLDER = "(Binary or very large file)"


def extract_diffs(files: Iterable[ChangedFile]) -> List[FileDiff]:
    """Map each changed file to a FileDiff, one to one and in order.

    Callers filter with :func:`azdocgen.git.patterns.filter_paths` first; no
    record is dropped here. Removed files get a synthetic body and zero
    additions, and files the API returned without a patch (binary or too large
    for the files endpoint) get a placeholder body.
    """
    return [_extract(changed) for changed in files]


def _extract(changed: ChangedFile) -> FileDiff:
    if changed.status == "removed":
        return FileDiff(
            filename=changed.path,
            status=changed.status,
            diff=REMOVED_PLACEHOLDER,
            additions=0,
            deletions=max(changed.deletions, 0),
        )
    return FileDiff(
        filename=changed.path,
        status=changed.status,
        diff=changed.patch or NO_PATCH_PLACEHOLDER,
        additions=max(changed.additions, 0),
        deletions=max(changed.deletions, 0),
    )


__all__ = ["NO_PATCH_PLACEHOLDER", "REMOVED_PLACEHOLDER", "extract_diffs"]
