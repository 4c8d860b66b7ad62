import pytest

from minigit.objects import hash_content
from minigit.repository import Repository, RepositoryError


@pytest.fixture
def repo(tmp_path):
    r = Repository(tmp_path)
    r.init()
    return r


def _write(repo, name, text):
    (repo.root / name).write_text(text)


def test_init_creates_layout(tmp_path):
    r = Repository(tmp_path)
    assert r.init() is True
    assert (tmp_path / ".minigit" / "objects").is_dir()
    assert (tmp_path / ".minigit" / "refs").is_dir()
    assert (tmp_path / ".minigit" / "HEAD").read_text() == "ref: refs/main\n"
    assert r.head() == ""
    assert r.read_index() == {}


def test_init_twice_returns_false(repo):
    assert repo.init() is False


def test_object_round_trip(repo):
    object_hash = repo.write_object("hello world\n")
    assert object_hash == hash_content("hello world\n")
    assert repo.read_object(object_hash) == "hello world\n"


def test_read_missing_object_raises(repo):
    with pytest.raises(RepositoryError):
        repo.read_object("deadbeefdeadbeef")


def test_index_round_trip(repo):
    index = {"a.txt": "abc", "b.txt": "def"}
    repo.write_index(index)
    assert repo.read_index() == index


def test_add_stages_file(repo):
    _write(repo, "a.txt", "content A\n")
    blob = repo.add("a.txt")
    assert blob == hash_content("content A\n")
    assert repo.read_index() == {"a.txt": blob}
    assert repo.read_object(blob) == "content A\n"


def test_add_missing_file_raises(repo):
    with pytest.raises(RepositoryError):
        repo.add("nope.txt")


def test_commit_updates_head_branch_and_clears_index(repo):
    _write(repo, "a.txt", "one\n")
    blob = repo.add("a.txt")
    c = repo.commit("first")
    assert repo.head() == c.hash
    assert repo.read_index() == {}
    assert (repo.refs_dir / "main").read_text().strip() == c.hash
    loaded = repo.read_commit(c.hash)
    assert loaded.message == "first"
    assert loaded.files == {"a.txt": blob}
    assert loaded.parent is None


def test_commit_with_empty_index_raises(repo):
    with pytest.raises(RepositoryError):
        repo.commit("nothing")


def test_history_follows_parents(repo):
    _write(repo, "a.txt", "one\n")
    repo.add("a.txt")
    first = repo.commit("first")
    _write(repo, "a.txt", "two\n")
    repo.add("a.txt")
    second = repo.commit("second")
    commits = list(repo.history())
    assert [c.hash for c in commits] == [second.hash, first.hash]
    assert commits[0].parent == first.hash
    assert [c.message for c in commits] == ["second", "first"]


def test_set_head_direct(repo):
    repo.set_head("cafebabe12345678")
    assert repo.head() == "cafebabe12345678"


def test_branch_create_and_target(repo):
    _write(repo, "a.txt", "one\n")
    repo.add("a.txt")
    c = repo.commit("first")
    assert repo.create_branch("feature") == c.hash
    assert repo.branch_target("feature") == c.hash
    with pytest.raises(RepositoryError):
        repo.branch_target("missing")


def test_resolve_branch_and_hash(repo):
    _write(repo, "a.txt", "one\n")
    repo.add("a.txt")
    c = repo.commit("first")
    assert repo.resolve("main") == c.hash
    assert repo.resolve(c.hash) == c.hash
    with pytest.raises(RepositoryError):
        repo.resolve("unknown")


def test_resolve_empty_branch_raises(repo):
    with pytest.raises(RepositoryError):
        repo.resolve("main")


def test_checkout_restores_snapshot(repo):
    _write(repo, "a.txt", "one\n")
    repo.add("a.txt")
    first = repo.commit("first")
    repo.create_branch("old")
    _write(repo, "a.txt", "two\n")
    _write(repo, "b.txt", "bee\n")
    repo.add("a.txt")
    repo.add("b.txt")
    repo.commit("second")
    _write(repo, "scratch.txt", "untracked\n")

    assert repo.checkout("old") == first.hash
    assert (repo.root / "a.txt").read_text() == "one\n"
    assert not (repo.root / "b.txt").exists()
    assert not (repo.root / "scratch.txt").exists()
    assert repo.git_dir.is_dir()
    assert repo.head() == first.hash
    assert repo.read_index() == {}


def test_checkout_unknown_target_raises(repo):
    with pytest.raises(RepositoryError):
        repo.checkout("nowhere")


def test_diff_reports_changed_lines(repo):
    h1 = repo.write_object("a\nb\n")
    h2 = repo.write_object("a\nc\nd\n")
    assert repo.diff(h1, h2) == ["- b", "+ c", "+ d"]
    assert repo.diff(h1, h1) == []


def test_diff_missing_object_is_empty(repo):
    h1 = repo.write_object("x\n")
    assert repo.diff(h1, "missingobject1") == ["- x"]