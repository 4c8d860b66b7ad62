"""Interactive and one-shot command line for the repository."""

from __future__ import annotations

import sys
from typing import TextIO

from minigit.merge import merge
from minigit.objects import format_log
from minigit.repository import Repository, RepositoryError

_COMMANDS = "init, add, commit, log, branch, checkout, merge, diff, exit"


def _split_word(text: str) -> tuple[str, str]:
    """Split off the first whitespace-delimited word; return it and the rest."""
    stripped = text.lstrip()
    if not stripped:
        return "", ""
    parts = stripped.split(None, 1)
    word = parts[0]
    return word, stripped[len(word):]


def _cmd_commit(repo: Repository, rest: str, out: TextIO) -> None:
    flag, message = _split_word(rest)
    if flag != "-m":
        out.write("Usage: commit -m <message>\n")
        return
    if not message:
        out.write("Commit message cannot be empty.\n")
        return
    if message.startswith(" "):
        message = message[1:]
    created = repo.commit(message)
    out.write(f"Committed as {created.hash}\n")


def _dispatch(repo: Repository, cmd: str, rest: str, out: TextIO) -> None:
    args = rest.split()
    if cmd == "init":
        if repo.init():
            out.write("Initialized empty MiniGit repository!\n")
        else:
            out.write("MiniGit repository already exists.\n")
    elif cmd == "add":
        if not args:
            out.write("Usage: add <filename>\n")
            return
        blob = repo.add(args[0])
        out.write(f"Staged {args[0]} as {blob}\n")
    elif cmd == "commit":
        _cmd_commit(repo, rest, out)
    elif cmd == "log":
        if not repo.head():
            out.write("No commits yet.\n")
        else:
            out.write(format_log(repo.history()))
    elif cmd == "branch":
        if not args:
            out.write("Usage: branch <branch-name>\n")
            return
        head_hash = repo.create_branch(args[0])
        out.write(f"Branch '{args[0]}' created at commit {head_hash}\n")
    elif cmd == "checkout":
        if not args:
            out.write("Usage: checkout <branch|commit>\n")
            return
        commit_hash = repo.checkout(args[0])
        out.write(f"Checked out {args[0]} (commit {commit_hash})\n")
    elif cmd == "merge":
        if not args:
            out.write("Usage: merge <branch>\n")
            return
        result = merge(repo, args[0])
        for name in result.conflicts:
            out.write(f"CONFLICT: {name}\n")
        if result.has_conflicts:
            out.write("Merge completed with conflicts.\n")
        else:
            out.write("Merge completed successfully.\n")
    elif cmd == "diff":
        if len(args) != 2:
            out.write("Usage: diff <commit1> <commit2>\n")
            return
        for line in repo.diff(args[0], args[1]):
            out.write(f"{line}\n")
    else:
        out.write(f"Unknown command. Available: {_COMMANDS}\n")


def run_command(repo: Repository, line: str, out: TextIO) -> bool:
    """Run one command line; return False when the session should end."""
    cmd, rest = _split_word(line)
    if not cmd:
        return True
    if cmd == "exit":
        out.write("Exiting MiniGit.\n")
        return False
    try:
        _dispatch(repo, cmd, rest, out)
    except RepositoryError as exc:
        out.write(f"Error: {exc}\n")
    return True


def repl(repo: Repository, stdin: TextIO, out: TextIO) -> None:
    """Read commands from ``stdin`` until ``exit`` or end of input."""
    out.write("Welcome to MiniGit! Type 'exit' to quit.\n")
    while True:
        out.write("- ")
        out.flush()
        line = stdin.readline()
        if not line:
            out.write("\n")
            break
        if not run_command(repo, line.rstrip("\n"), out):
            break


def main(argv: list[str] | None = None) -> int:
    """Run a single command from ``argv``, or an interactive session if none."""
    args = sys.argv[1:] if argv is None else list(argv)
    repo = Repository(".")
    if not args:
        repl(repo, sys.stdin, sys.stdout)
        return 0
    run_command(repo, " ".join(args), sys.stdout)
    return 0