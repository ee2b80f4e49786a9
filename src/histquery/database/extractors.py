"""Extractors: functions computing whole collections from the data source.

Each extractor takes the source followed by up to four prerequisite
collections, and returns a list or a dict ready to be cached.
"""

from collections import defaultdict, deque
from typing import Any, Dict, Iterable, List, Mapping, Optional, TypeVar

from ..objects import Change, Commit, CommitId, Head, PathId, ProjectId, UserId
from ..source import DataSource

K = TypeVar("K")


# Enumerations

def project_ids(source: DataSource) -> List[ProjectId]:
    return list(source.project_ids())


def commit_ids(source: DataSource) -> List[CommitId]:
    return list(source.commit_ids())


def user_ids(source: DataSource) -> List[UserId]:
    return list(source.user_ids())


def path_ids(source: DataSource) -> List[PathId]:
    return list(source.path_ids())


# Entities and raw facts

def projects(source: DataSource) -> Dict:
    return _lookup_all(source.project_ids(), source.project)


def commits(source: DataSource) -> Dict:
    return _lookup_all(source.commit_ids(), source.commit)


def users(source: DataSource) -> Dict:
    return _lookup_all(source.user_ids(), source.user)


def paths(source: DataSource) -> Dict:
    return _lookup_all(source.path_ids(), source.path)


def project_heads(source: DataSource) -> Dict[ProjectId, List[Head]]:
    return _lookup_all(source.project_ids(), source.project_heads)


def project_metadata(source: DataSource) -> Dict[ProjectId, Dict[str, Any]]:
    return _lookup_all(source.project_ids(), source.project_metadata)


def commit_messages(source: DataSource) -> Dict[CommitId, str]:
    return _lookup_all(source.commit_ids(), source.commit_message)


def commit_author_timestamps(source: DataSource) -> Dict[CommitId, int]:
    return _lookup_all(source.commit_ids(), source.commit_author_timestamp)


def commit_committer_timestamps(source: DataSource) -> Dict[CommitId, int]:
    return _lookup_all(source.commit_ids(), source.commit_committer_timestamp)


def commit_changes(source: DataSource) -> Dict[CommitId, List[Change]]:
    return _lookup_all(source.commit_ids(), source.commit_changes)


def _lookup_all(ids: Iterable[K], lookup) -> Dict[K, Any]:
    result = {}
    for id in ids:
        value = lookup(id)
        if value is not None:
            result[id] = value
    return result


# Derived facts

def project_commits(
    source: DataSource,
    heads: Mapping[ProjectId, List[Head]],
    commits: Mapping[CommitId, Commit],
) -> Dict[ProjectId, List[CommitId]]:
    """Commits reachable from each project's heads through parent links."""
    result = {}
    for project_id, project_heads in heads.items():
        reached = set()
        pending = deque(head.commit_id for head in project_heads)
        while pending:
            commit_id = pending.popleft()
            if commit_id in reached:
                continue
            commit = commits.get(commit_id)
            if commit is None:
                continue
            reached.add(commit_id)
            pending.extend(commit.parents)
        result[project_id] = sorted(reached)
    return result


def count_per_key(source: DataSource, members: Mapping[K, List[Any]]) -> Dict[K, int]:
    return {key: len(values) for key, values in members.items()}


def project_authors(
    source: DataSource,
    project_commits: Mapping[ProjectId, List[CommitId]],
    commits: Mapping[CommitId, Commit],
) -> Dict[ProjectId, List[UserId]]:
    return {
        project_id: sorted({commits[c].author_id for c in commit_ids if c in commits})
        for project_id, commit_ids in project_commits.items()
    }


def project_committers(
    source: DataSource,
    project_commits: Mapping[ProjectId, List[CommitId]],
    commits: Mapping[CommitId, Commit],
) -> Dict[ProjectId, List[UserId]]:
    return {
        project_id: sorted({commits[c].committer_id for c in commit_ids if c in commits})
        for project_id, commit_ids in project_commits.items()
    }


def merge_members(
    source: DataSource, *member_maps: Mapping[K, List[Any]]
) -> Dict[K, List[Any]]:
    """Sorted union of the members listed under each key in every map."""
    merged = defaultdict(set)
    for members in member_maps:
        for key, values in members.items():
            merged[key].update(values)
    return {key: sorted(values) for key, values in merged.items()}


def project_paths(
    source: DataSource,
    project_commits: Mapping[ProjectId, List[CommitId]],
    changes: Mapping[CommitId, List[Change]],
) -> Dict[ProjectId, List[PathId]]:
    return {
        project_id: sorted({
            change.path_id for c in commit_ids for change in changes.get(c, [])
        })
        for project_id, commit_ids in project_commits.items()
    }


def user_authored_commits(
    source: DataSource, commits: Mapping[CommitId, Commit]
) -> Dict[UserId, List[CommitId]]:
    result = defaultdict(list)
    for commit_id, commit in commits.items():
        result[commit.author_id].append(commit_id)
    return dict(result)


def user_committed_commits(
    source: DataSource, commits: Mapping[CommitId, Commit]
) -> Dict[UserId, List[CommitId]]:
    result = defaultdict(list)
    for commit_id, commit in commits.items():
        result[commit.committer_id].append(commit_id)
    return dict(result)


def time_span(
    source: DataSource,
    members: Mapping[K, List[CommitId]],
    *timestamps: Mapping[CommitId, int],
) -> Dict[K, int]:
    """Seconds between the earliest and latest timestamp of each key's commits.

    Every given timestamp map contributes. A key whose commits have a single
    timestamp spans zero; a key with no timestamps at all is left out.
    """
    result = {}
    for key, commit_ids in members.items():
        observed = [
            stamps[commit_id]
            for commit_id in commit_ids
            for stamps in timestamps
            if commit_id in stamps
        ]
        if observed:
            result[key] = max(observed) - min(observed)
    return result


def project_max_experience(
    source: DataSource,
    project_authors: Mapping[ProjectId, List[UserId]],
    user_experience: Mapping[UserId, int],
) -> Dict[ProjectId, int]:
    """Largest experience among each project's authors."""
    result = {}
    for project_id, authors in project_authors.items():
        known: List[int] = [user_experience[a] for a in authors if a in user_experience]
        if known:
            result[project_id] = max(known)
    return result


def first_parent(commits: Mapping[CommitId, Commit], commit_id: CommitId) -> Optional[CommitId]:
    commit = commits.get(commit_id)
    if commit is None or not commit.parents:
        return None
    return commit.parents[0]
