"""Three-way merge of a branch into the current HEAD."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from minigit.objects import Commit
from minigit.repository import Repository, RepositoryError

_CONFLICT_START = "<<<<<<< HEAD\n"
_CONFLICT_MIDDLE = "=======\n"
_CONFLICT_END = ">>>>>>>\n"


@dataclass
class MergeResult:
    """The merge commit that was recorded and the files left in conflict."""

    commit: Commit
    conflicts: list[str] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


def _parent(repo: Repository, commit_hash: str) -> str:
    try:
        return repo.read_commit(commit_hash).parent or ""
    except RepositoryError:
        return ""


def _commit_files(repo: Repository, commit_hash: str) -> dict[str, str]:
    if not commit_hash:
        return {}
    try:
        return repo.read_commit(commit_hash).files
    except RepositoryError:
        return {}


def _blob_text(repo: Repository, blob_hash: str) -> str:
    if not blob_hash:
        return ""
    try:
        return repo.read_object(blob_hash)
    except RepositoryError:
        return ""


def _write_working_file(repo: Repository, name: str, text: str) -> None:
    destination = repo.root / name
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(text.encode("utf-8", errors="surrogateescape"))


def find_common_ancestor(repo: Repository, a: str, b: str) -> str:
    """Return the nearest first-parent ancestor shared by ``a`` and ``b``, or ""."""
    ancestors: set[str] = set()
    current = a
    while current and current not in ancestors:
        ancestors.add(current)
        current = _parent(repo, current)
    seen: set[str] = set()
    current = b
    while current and current not in seen:
        if current in ancestors:
            return current
        seen.add(current)
        current = _parent(repo, current)
    return ""


def merge(repo: Repository, branch_name: str) -> MergeResult:
    """Merge ``branch_name`` into HEAD, write the result and record a merge commit."""
    target = repo.branch_target(branch_name)
    current = repo.head()
    base = find_common_ancestor(repo, current, target)

    base_files = _commit_files(repo, base)
    current_files = _commit_files(repo, current)
    other_files = _commit_files(repo, target)

    merged: dict[str, str] = {}
    conflicts: list[str] = []

    for name in sorted(base_files.keys() | current_files.keys() | other_files.keys()):
        base_blob = base_files.get(name, "")
        current_blob = current_files.get(name, "")
        other_blob = other_files.get(name, "")

        if current_blob == other_blob or current_blob == base_blob:
            chosen = other_blob
        elif other_blob == base_blob:
            chosen = current_blob
        else:
            text = (
                _CONFLICT_START
                + _blob_text(repo, current_blob)
                + _CONFLICT_MIDDLE
                + _blob_text(repo, other_blob)
                + _CONFLICT_END
            )
            _write_working_file(repo, name, text)
            conflicts.append(name)
            continue

        if chosen:
            merged[name] = chosen
            _write_working_file(repo, name, _blob_text(repo, chosen))

    repo.write_index(merged)
    merge_commit = Commit(
        message=f"Merge branch '{branch_name}'",
        timestamp=time.ctime(),
        parent=current or None,
        second_parent=target,
        files=dict(merged),
    )
    merge_commit.hash = repo.write_object(merge_commit.serialize())
    repo.set_head(merge_commit.hash)
    return MergeResult(commit=merge_commit, conflicts=conflicts)