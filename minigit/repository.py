"""On-disk repository: objects, index, HEAD, branches and checkout."""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import Iterator

from minigit.objects import Commit, hash_content

logger = logging.getLogger(__name__)

_REPO_DIR = ".minigit"
_PRESERVED = frozenset({_REPO_DIR, ".vscode", "node_modules"})
_REF_PREFIX = "ref:"


class RepositoryError(Exception):
    """Raised when a repository operation cannot be carried out."""


class Repository:
    """A repository whose working tree is ``root``."""

    def __init__(self, root: str | Path = ".") -> None:
        self.root = Path(root)
        self.git_dir = self.root / _REPO_DIR
        self.objects_dir = self.git_dir / "objects"
        self.refs_dir = self.git_dir / "refs"
        self.head_file = self.git_dir / "HEAD"
        self.index_file = self.git_dir / "index"

    def init(self) -> bool:
        """Create an empty repository; return False if one already exists."""
        if self.git_dir.exists():
            return False
        self.objects_dir.mkdir(parents=True)
        self.refs_dir.mkdir(parents=True)
        self.head_file.write_text(f"{_REF_PREFIX} refs/main\n")
        (self.refs_dir / "main").write_text("\n")
        self.index_file.write_text("")
        return True

    def _ensure(self) -> None:
        self.objects_dir.mkdir(parents=True, exist_ok=True)
        self.index_file.touch(exist_ok=True)
        self.head_file.touch(exist_ok=True)

    def _object_path(self, object_hash: str) -> Path:
        return self.objects_dir / object_hash

    def read_object(self, object_hash: str) -> str:
        """Return the text of a stored object."""
        path = self._object_path(object_hash)
        if not object_hash or not path.is_file():
            raise RepositoryError(f"Object not found: {object_hash}")
        return path.read_bytes().decode("utf-8", errors="surrogateescape")

    def write_object(self, content: str | bytes) -> str:
        """Store content under its hash and return the hash."""
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        object_hash = hash_content(data)
        self.objects_dir.mkdir(parents=True, exist_ok=True)
        self._object_path(object_hash).write_bytes(data)
        return object_hash

    def read_index(self) -> dict[str, str]:
        """Return the staged files as a mapping of name to blob hash."""
        index: dict[str, str] = {}
        if not self.index_file.is_file():
            return index
        for line in self.index_file.read_text().splitlines():
            name, sep, blob = line.partition(" ")
            if sep:
                index[name] = blob
        return index

    def write_index(self, index: dict[str, str]) -> None:
        """Replace the staging area with ``index``."""
        self.git_dir.mkdir(parents=True, exist_ok=True)
        self.index_file.write_text(
            "".join(f"{name} {blob}\n" for name, blob in index.items())
        )

    def add(self, filename: str) -> str:
        """Stage a working-tree file and return its blob hash."""
        self._ensure()
        path = self.root / filename
        if not path.is_file():
            raise RepositoryError(f"File {filename} does not exist.")
        blob_hash = self.write_object(path.read_bytes())
        index = self.read_index()
        index[filename] = blob_hash
        self.write_index(index)
        return blob_hash

    def _head_line(self) -> str:
        if not self.head_file.is_file():
            return ""
        lines = self.head_file.read_text().splitlines()
        return lines[0] if lines else ""

    def _symbolic_ref(self) -> str | None:
        line = self._head_line()
        if line.startswith(_REF_PREFIX):
            return line[len(_REF_PREFIX):].strip()
        return None

    def head(self) -> str:
        """Return the commit hash HEAD points at, or an empty string."""
        ref = self._symbolic_ref()
        if ref is None:
            return self._head_line()
        ref_path = self.git_dir / ref
        if not ref_path.is_file():
            return ""
        lines = ref_path.read_text().splitlines()
        return lines[0] if lines else ""

    def set_head(self, commit_hash: str) -> None:
        """Point HEAD directly at ``commit_hash``."""
        self.git_dir.mkdir(parents=True, exist_ok=True)
        self.head_file.write_text(f"{commit_hash}\n")

    def commit(self, message: str) -> Commit:
        """Record the staged files as a new commit and clear the index."""
        self._ensure()
        index = self.read_index()
        if not index:
            raise RepositoryError("Nothing to commit.")
        new_commit = Commit(
            message=message,
            timestamp=time.ctime(),
            parent=self.head() or None,
            files=dict(index),
        )
        new_commit.hash = self.write_object(new_commit.serialize())
        ref = self._symbolic_ref()
        if ref is not None:
            ref_path = self.git_dir / ref
            ref_path.parent.mkdir(parents=True, exist_ok=True)
            ref_path.write_text(f"{new_commit.hash}\n")
        self.set_head(new_commit.hash)
        self.write_index({})
        return new_commit

    def read_commit(self, commit_hash: str) -> Commit:
        """Load the commit stored under ``commit_hash``."""
        return Commit.parse(commit_hash, self.read_object(commit_hash))

    def history(self, start: str | None = None) -> Iterator[Commit]:
        """Yield commits from ``start`` (default HEAD) back along first parents."""
        current = self.head() if start is None else start
        while current and self._object_path(current).is_file():
            found = self.read_commit(current)
            yield found
            current = found.parent or ""

    def create_branch(self, name: str) -> str:
        """Create a branch at the current HEAD and return its commit hash."""
        if not name:
            raise RepositoryError("Branch name cannot be empty.")
        head_hash = self.head()
        self.refs_dir.mkdir(parents=True, exist_ok=True)
        (self.refs_dir / name).write_text(f"{head_hash}\n")
        return head_hash

    def branch_target(self, name: str) -> str:
        """Return the commit hash a branch points at."""
        path = self.refs_dir / name
        if not name or not path.is_file():
            raise RepositoryError(f"No such branch: {name}")
        lines = path.read_text().splitlines()
        return lines[0] if lines else ""

    def resolve(self, target: str) -> str:
        """Turn a branch name or commit hash into a commit hash."""
        if target and (self.refs_dir / target).is_file():
            commit_hash = self.branch_target(target)
        elif target and self._object_path(target).is_file():
            commit_hash = target
        else:
            raise RepositoryError(f"No such branch or commit: {target}")
        if not commit_hash:
            raise RepositoryError("Commit hash is empty — aborting.")
        return commit_hash

    def _clear_working_tree(self) -> None:
        for entry in self.root.iterdir():
            if entry.name in _PRESERVED:
                continue
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as exc:
                logger.warning("Could not remove %s: %s", entry, exc)

    def checkout(self, target: str) -> str:
        """Replace the working tree with a commit's files; return its hash."""
        commit_hash = self.resolve(target)
        if not self._object_path(commit_hash).is_file():
            raise RepositoryError(f"Commit file not found for hash: {commit_hash}")
        snapshot = self.read_commit(commit_hash)
        self._clear_working_tree()
        for name, blob_hash in snapshot.files.items():
            blob_path = self._object_path(blob_hash)
            if not blob_path.is_file():
                logger.warning("Missing blob: %s for file %s", blob_hash, name)
                continue
            destination = self.root / name
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(blob_path.read_bytes())
        self.set_head(commit_hash)
        self.write_index({})
        return commit_hash

    def _object_lines(self, object_hash: str) -> list[str]:
        path = self._object_path(object_hash)
        if not object_hash or not path.is_file():
            return []
        text = path.read_bytes().decode("utf-8", errors="surrogateescape")
        return text.splitlines()

    def diff(self, commit1: str, commit2: str) -> list[str]:
        """Compare two objects line by line, as ``- old`` / ``+ new`` lines."""
        lines1 = self._object_lines(commit1)
        lines2 = self._object_lines(commit2)
        size = max(len(lines1), len(lines2))
        lines1 += [""] * (size - len(lines1))
        lines2 += [""] * (size - len(lines2))
        result: list[str] = []
        for old, new in zip(lines1, lines2):
            if old == new:
                continue
            if old:
                result.append(f"- {old}")
            if new:
                result.append(f"+ {new}")
        return result