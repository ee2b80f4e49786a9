"""File names of every cached collection."""

from enum import Enum

CACHE_EXTENSION = ".cbor"


class CacheName(str, Enum):
    PROJECT_IDS = "project_ids"
    COMMIT_IDS = "commit_ids"
    USER_IDS = "user_ids"
    PATH_IDS = "path_ids"

    PROJECTS = "projects"
    PROJECT_HEADS = "project_heads"
    PROJECT_METADATA = "project_metadata"
    PROJECT_COMMITS = "project_commits"
    PROJECT_COMMIT_COUNT = "project_commit_count"
    PROJECT_AUTHORS = "project_authors"
    PROJECT_COMMITTERS = "project_committers"
    PROJECT_USERS = "project_users"
    PROJECT_PATHS = "project_paths"
    PROJECT_LIFETIME = "project_lifetime"
    PROJECT_MAX_EXPERIENCE = "project_max_experience"

    USERS = "users"
    USER_COMMITS = "user_commits"
    USER_AUTHORED_COMMITS = "user_authored_commits"
    USER_COMMITTED_COMMITS = "user_committed_commits"
    USER_AUTHOR_EXPERIENCE = "user_author_experience"
    USER_COMMITTER_EXPERIENCE = "user_committer_experience"
    USER_EXPERIENCE = "user_experience"

    PATHS = "paths"

    COMMITS = "commits"
    COMMIT_MESSAGES = "commit_messages"
    COMMIT_AUTHOR_TIMESTAMPS = "commit_author_timestamps"
    COMMIT_COMMITTER_TIMESTAMPS = "commit_committer_timestamps"
    COMMIT_CHANGES = "commit_changes"
    COMMIT_HISTORY_DEPTH = "commit_history_depth"
    COMMIT_CUMULATIVE_CHANGES = "commit_cumulative_changes"

    @property
    def file_name(self) -> str:
        return self.value + CACHE_EXTENSION

    def __str__(self) -> str:
        return self.value
