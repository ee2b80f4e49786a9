"""Shared test fixtures: a small repository-history snapshot.

Projects 1, 2 and 3 have linear histories of 5, 50 and 500 commits; project 4
has no commits at all.
"""

import json

import pytest

from histquery.database import Database
from histquery.source import InMemorySource

T0 = 1_500_000_000
HOUR = 3600
DAY = 24 * HOUR

# project id -> (first commit id, commit count, author ids, spacing in seconds)
HISTORIES = {
    1: (1, 5, [1], HOUR),
    2: (101, 50, [2, 1], HOUR),
    3: (1001, 500, [3], 2 * DAY),
}


def _commits_for(project_id):
    first, count, authors, spacing = HISTORIES[project_id]
    commits = []
    for offset in range(count):
        commit_id = first + offset
        author = authors[offset % len(authors)]
        commits.append({
            "id": commit_id,
            "hash": f"{commit_id:040x}",
            "author": author,
            "committer": author,
            "parents": [commit_id - 1] if offset > 0 else [],
            "message": "x" * (10 * (offset + 1)) if project_id == 1 else f"commit {commit_id}",
            "author_time": T0 + offset * spacing,
            "committer_time": T0 + offset * spacing + 60,
            "changes": [{"path": offset % 3 + 1, "snapshot": commit_id}],
        })
    return commits


def build_snapshot():
    """The raw snapshot, in the JSON layout InMemorySource understands."""
    commits = []
    for project_id in HISTORIES:
        commits.extend(_commits_for(project_id))

    def head(project_id):
        first, count, _, _ = HISTORIES[project_id]
        return [{"name": "main", "commit": first + count - 1}]

    return {
        "name": "sample",
        "projects": [
            {
                "id": 1,
                "url": "https://github.com/alice/tiny",
                "heads": head(1),
                "metadata": {"stars": 10, "issues": 1, "language": "Rust", "is_fork": False,
                             "default_branch": "main", "has_wiki": "true", "topics": "cli,parsing"},
            },
            {
                "id": 2,
                "url": "https://github.com/bob/medium",
                "heads": head(2),
                "metadata": {"stars": 300, "issues": 12, "language": "python", "is_fork": True},
            },
            {
                "id": 3,
                "url": "https://github.com/carol/large",
                "heads": head(3),
                "metadata": {"stars": 20, "issues": 40, "language": "Rust", "is_fork": False},
            },
            {
                "id": 4,
                "url": "https://github.com/dave/empty",
                "heads": [],
            },
        ],
        "commits": commits,
        "users": [
            {"id": 1, "email": "alice@example.com"},
            {"id": 2, "email": "bob@example.com"},
            {"id": 3, "email": "carol@example.com"},
        ],
        "paths": [
            {"id": 1, "location": "src/main.rs"},
            {"id": 2, "location": "README.md"},
            {"id": 3, "location": "tools/build.py"},
        ],
        "snapshots": [],
    }


@pytest.fixture
def source():
    """In-memory snapshot with projects of 5, 50 and 500 commits plus an empty one."""
    return InMemorySource.from_dict(build_snapshot(), name="sample")


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def database(source, cache_dir):
    """Database over the sample snapshot, caching into a temporary directory."""
    with Database(source, cache_dir) as db:
        yield db


@pytest.fixture
def uncached_database(source):
    """Database over the sample snapshot that never touches the disk."""
    with Database(source) as db:
        yield db


@pytest.fixture
def snapshot_file(tmp_path):
    """The sample snapshot written as a JSON file."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(build_snapshot()), encoding="utf-8")
    return path
