# minigit

A small version control system that keeps its history in a `.minigit`
directory beside your files. It stages files, records commits, creates
branches, checks out earlier states, prints line differences between two
stored objects and performs three-way merges between branches.

Every stored object (file content or commit) is named by a 64-bit hash of
its bytes, written in lower-case hexadecimal.

## Installing

```
pip install .
```

## Using the command line

Run `minigit` with no arguments to open an interactive prompt in the
current directory. The session ends at `exit` or at the end of input.

```
$ minigit
Welcome to MiniGit! Type 'exit' to quit.
- init
Initialized empty MiniGit repository!
- add notes.txt
Staged notes.txt as <blob hash>
- commit -m first notes
Committed as <commit hash>
- branch feature
Branch 'feature' created at commit <commit hash>
- exit
Exiting MiniGit.
```

The prompt understands these commands:

| Command | What it does |
| --- | --- |
| `init` | create an empty repository in the current directory |
| `add <file>` | store the file's content and stage it |
| `commit -m <message>` | record the staged files as a new commit and clear the staging area |
| `log` | list commits from HEAD back along first parents (`No commits yet.` if there are none) |
| `branch <name>` | create a branch that points at the current commit |
| `checkout <branch or commit>` | replace the working files with those of a commit |
| `merge <branch>` | merge a branch into the current commit and record a merge commit |
| `diff <commit1> <commit2>` | print the lines that differ between two stored objects |
| `exit` | leave the prompt |

Anything else prints the list of available commands. When an operation
cannot go ahead, the prompt prints `Error: ` followed by the reason and
carries on.

You can also give a single command as arguments:

```
minigit add notes.txt
minigit commit -m fix typo in notes
minigit diff <commit1> <commit2>
```

### How the commands behave

- `init` makes HEAD name the branch `main`. The first commit moves `main`;
  after that, and after any checkout or merge, HEAD holds a commit hash
  directly and later commits do not move any branch.
- `checkout` removes every entry in the working directory except
  `.minigit`, `.vscode` and `node_modules`, then writes the files recorded
  in the commit. The staging area is emptied, so staged changes are lost.
  A branch name is looked up before a commit hash.
- `diff` compares the two objects line by line by position; it is not a
  minimal diff. Lines only in the first are shown as `- line`, lines only in
  the second as `+ line`.
- `merge` finds the nearest shared first-parent ancestor and, file by file,
  keeps whichever side changed. A file changed on both sides is written
  with conflict markers, left out of the merge commit, and reported as
  `CONFLICT: <file>`:

  ```
  <<<<<<< HEAD
  current content
  =======
  other content
  >>>>>>>
  ```

## Using it from Python

```python
from minigit.repository import Repository, RepositoryError
from minigit.merge import merge, find_common_ancestor
from minigit.objects import format_log

repo = Repository(".")
repo.init()
repo.add("notes.txt")
first = repo.commit("first notes")      # a minigit.objects.Commit
repo.create_branch("feature")

print(format_log(repo.history()))

result = merge(repo, "feature")         # a minigit.merge.MergeResult
print(result.commit.hash, result.conflicts, result.has_conflicts)
```

`Repository` also offers `read_object`, `write_object`, `read_index`,
`write_index`, `head`, `set_head`, `read_commit`, `branch_target`,
`resolve`, `checkout` and `diff`. `minigit.objects` provides
`hash_content`, `current_timestamp`, the `Commit` dataclass with
`serialize` and `Commit.parse`, and `format_log`.

Operations that cannot go ahead, such as adding a missing file, committing
with nothing staged or checking out an unknown branch, raise
`RepositoryError`.

## What it does not do

There is no status command, no listing or deleting of branches, no
unstaging, no remotes, and no way to resolve a conflict other than editing
the file, adding it and committing again.

## Running the tests

```
pip install .[test]
pytest
```