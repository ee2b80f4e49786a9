"""Canned queries over projects.

Each query ranks projects by one metric and keeps the top `n`. The registry
pairs every query with the metric it ranks by, so results can be exported as
``id, url, metric`` rows.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .attrib import (
    AtLeast,
    Count,
    Filter,
    From,
    FromEach,
    FromEachIf,
    Mean,
    Median,
    Random,
    Ratio,
    Select,
    Top,
    commit,
    project,
    user,
)
from .attrib.capabilities import Attribute
from .database import Database
from .query import Projection, Stream

TWO_YEARS = 2 * 365 * 24 * 60 * 60


def commits_by_experienced_authors(experience: int) -> FromEachIf:
    """Project commits whose author has at least `experience` seconds of experience."""
    return FromEachIf(
        project.Commits(),
        AtLeast(From(commit.Author(), user.AuthorExperience()), experience),
    )


def _ranked(database: Database, metric: Attribute, n: int, condition: Optional[Filter] = None) -> Stream:
    stream = database.projects()
    if condition is not None:
        stream = stream.filter_by(condition)
    return stream.sort_by(metric).sample(Top(n))


def stars(database: Database, n: int = 50) -> Stream:
    return _ranked(database, project.Stars(), n)


def issues(database: Database, n: int = 50) -> Stream:
    return _ranked(database, project.Issues(), n)


def buggy_issues(database: Database, n: int = 50) -> Stream:
    return _ranked(database, project.BuggyIssues(), n)


def commits(database: Database, n: int = 50) -> Stream:
    return _ranked(database, Count(project.Commits()), n)


def message_sizes(database: Database, n: int = 50) -> Stream:
    """Projects with the longest median commit message."""
    return _ranked(database, Median(FromEach(project.Commits(), commit.MessageLength())), n)


def changes_in_commits(database: Database, n: int = 50) -> Stream:
    """Projects whose commits change the most paths on average."""
    return _ranked(database, Mean(FromEach(project.Commits(), Count(commit.Changes()))), n)


def experienced_authors(database: Database, n: int = 50, experience: int = TWO_YEARS) -> Stream:
    """Projects with an author of at least `experience` seconds, by commit count."""
    return _ranked(
        database,
        Count(project.Commits()),
        n,
        condition=AtLeast(project.MaxExperience(), experience),
    )


def experienced_authors_ratio(
    database: Database, n: int = 50, experience: int = TWO_YEARS, min_ratio: float = 0.5
) -> Stream:
    """Projects where at least `min_ratio` of commits come from experienced authors."""
    ratio = Ratio(commits_by_experienced_authors(experience), project.Commits())
    return _ranked(database, Count(project.Commits()), n, condition=AtLeast(ratio, min_ratio))


def random_projects(database: Database, n: int = 50, seed: int = 42) -> Stream:
    """A uniform random sample of projects, in snapshot order."""
    return database.projects().sample(Random(n, seed=seed))


@dataclass(frozen=True)
class CannedQuery:
    name: str
    run: Callable[..., Stream]
    metric: Attribute
    metric_name: str
    seeded: bool = False

    @property
    def description(self) -> str:
        doc = self.run.__doc__ or f"Projects with the most {self.metric_name.replace('_', ' ')}."
        return doc.strip().splitlines()[0]

    @property
    def header(self) -> List[str]:
        return ["project_id", "url", self.metric_name]

    def rows(self, database: Database, n: int, seed: int = 42) -> Projection:
        """Run the query and project each result to ``(id, url, metric)``.

        `seed` only reaches queries that sample at random.
        """
        stream = self.run(database, n, seed=seed) if self.seeded else self.run(database, n)
        return stream.map_into(Select(project.Id(), project.URL(), self.metric))


QUERIES: Dict[str, CannedQuery] = {
    query.name: query
    for query in [
        CannedQuery("stars", stars, project.Stars(), "stars"),
        CannedQuery("issues", issues, project.Issues(), "issues"),
        CannedQuery("buggy_issues", buggy_issues, project.BuggyIssues(), "buggy_issues"),
        CannedQuery("commits", commits, Count(project.Commits()), "commits"),
        CannedQuery(
            "message_sizes",
            message_sizes,
            Median(FromEach(project.Commits(), commit.MessageLength())),
            "median_message_length",
        ),
        CannedQuery(
            "changes_in_commits",
            changes_in_commits,
            Mean(FromEach(project.Commits(), Count(commit.Changes()))),
            "mean_changes_per_commit",
        ),
        CannedQuery("experienced_authors", experienced_authors, Count(project.Commits()), "commits"),
        CannedQuery(
            "experienced_authors_ratio",
            experienced_authors_ratio,
            Ratio(commits_by_experienced_authors(TWO_YEARS), project.Commits()),
            "experienced_commit_ratio",
        ),
        CannedQuery("random", random_projects, Count(project.Commits()), "commits", seeded=True),
    ]
}
