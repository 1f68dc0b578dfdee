"""
Shared fixtures: isolated git environment, documentation repositories and
a stand-in site builder that behaves like mdBook for the parts versiondocs
relies on (reads book.toml, honours build-dir, fails on demand).
"""

import os
import shutil
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from versiondocs.config import get_default_config


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

FAKE_BUILDER = textwrap.dedent('''
    import pathlib
    import sys
    import tomllib

    root = pathlib.Path.cwd()
    config = tomllib.loads((root / "book.toml").read_text())
    if (root / "src" / "FAIL").exists():
        sys.stderr.write("simulated build failure\\n")
        sys.exit(1)
    out = (root / config.get("build", {}).get("build-dir", "book")).resolve()
    out.mkdir(parents=True, exist_ok=True)
    title = config.get("book", {}).get("title", "")
    for page in sorted((root / "src").glob("*.md")):
        (out / (page.stem + ".html")).write_text(page.read_text())
    (out / "index.html").write_text("<h1>" + title + "</h1>\\n")
''')

BOOK_TOML = textwrap.dedent('''
    [book]
    title = "placeholder"
    authors = ["docs team"]

    [build]
    build-dir = "../../rendered-docs"
''')


def git(cwd, *args):
    """Run git and return stripped stdout."""
    result = subprocess.run(
        ["git", *args], cwd=str(cwd), capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the user's git and versiondocs configuration."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Docs Bot")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "docs@example.invalid")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Docs Bot")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "docs@example.invalid")
    for key in list(os.environ):
        if key.startswith("VERSIONDOCS_"):
            monkeypatch.delenv(key)


@pytest.fixture
def fake_builder(tmp_path):
    """Command line of the stand-in site builder."""
    script = tmp_path / "fake_mdbook.py"
    script.write_text(FAKE_BUILDER)
    return [sys.executable, str(script)]


@pytest.fixture
def builder_config(fake_builder):
    """Default configuration wired to the stand-in builder."""
    config = get_default_config()
    config["builder"]["command"] = fake_builder
    config["project"]["name"] = "demo"
    return config


class DocsRepo:
    """A throwaway git repository with helpers for documentation history."""

    def __init__(self, path: Path):
        self.path = path
        path.mkdir(parents=True)
        git(path, "init", "--quiet")
        git(path, "symbolic-ref", "HEAD", "refs/heads/main")
        (path / ".gitignore").write_text("rendered-docs/\n")
        (path / "README.md").write_text("demo project\n")
        self.commit("initial commit")

    @property
    def book_root(self) -> Path:
        return self.path / "docs" / ".mdbook"

    def write_docs(self, pages, with_config=True):
        """Replace the documentation sources with ``pages``."""
        if self.book_root.exists():
            shutil.rmtree(self.book_root)
        src = self.book_root / "src"
        src.mkdir(parents=True)
        if with_config:
            (self.book_root / "book.toml").write_text(BOOK_TOML)
        for name, content in pages.items():
            (src / name).write_text(content)

    def commit(self, message):
        git(self.path, "add", "--all")
        git(self.path, "commit", "--quiet", "--allow-empty", "-m", message)
        return git(self.path, "rev-parse", "HEAD")

    def tag(self, name):
        git(self.path, "tag", name)

    def branch_files(self, branch):
        """Map of path -> blob hash on ``branch``."""
        listing = git(self.path, "ls-tree", "-r", branch)
        files = {}
        for line in listing.splitlines():
            meta, path = line.split("\t", 1)
            files[path] = meta.split()[2]
        return files

    def show(self, branch, path):
        return git(self.path, "show", f"{branch}:{path}")

    def branch_names(self):
        return git(self.path, "branch", "--format=%(refname:short)").splitlines()

    def worktree_count(self):
        listing = git(self.path, "worktree", "list", "--porcelain")
        return sum(1 for line in listing.splitlines() if line.startswith("worktree "))


@pytest.fixture
def docs_repo(tmp_path):
    """
    Repository with this history:

    - v0.7.0: no documentation build configuration
    - v0.8.0: pages but no book.toml (the mislabeled release)
    - v0.8.0-mdbook: same pages with book.toml
    - v0.9.0, v0.10.0: regular releases
    - main: in-development docs
    """
    repo = DocsRepo(tmp_path / "repo")
    repo.tag("v0.7.0")

    repo.write_docs({"intro.md": "intro 0.8\n"}, with_config=False)
    repo.commit("docs for 0.8")
    repo.tag("v0.8.0")

    repo.write_docs({"intro.md": "intro 0.8\n"})
    repo.commit("add book.toml")
    repo.tag("v0.8.0-mdbook")

    repo.write_docs({"intro.md": "intro 0.9\n", "guide.md": "guide 0.9\n"})
    repo.commit("docs for 0.9")
    repo.tag("v0.9.0")

    repo.write_docs({"intro.md": "intro 0.10\n", "guide.md": "guide 0.10\n"})
    repo.commit("docs for 0.10")
    repo.tag("v0.10.0")

    repo.write_docs({"intro.md": "intro main\n", "guide.md": "guide main\n", "new.md": "new\n"})
    repo.commit("docs in development")
    return repo
