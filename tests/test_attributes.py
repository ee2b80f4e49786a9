"""Tests for entity attributes, statistics and composition adapters."""

import pytest

from histquery.attrib import (
    Count,
    From,
    FromEach,
    FromEachIf,
    AtLeast,
    Length,
    Max,
    Mean,
    Median,
    Min,
    MinMax,
    Ratio,
    Select,
    commit,
    path,
    project,
    user,
)
from histquery.objects import CommitId, Language, PathId, ProjectId, UserId

HOUR = 3600


def _project(database, id):
    return next(p for p in database.projects() if p.item.id == ProjectId(id))


def _commit(database, id):
    return next(c for c in database.commits() if c.item.id == CommitId(id))


def _user(database, id):
    return next(u for u in database.users() if u.item.id == UserId(id))


class TestProjectAttributes:
    def test_identity_and_metadata(self, database):
        tiny = _project(database, 1)
        assert project.Id().get(tiny) == ProjectId(1)
        assert project.URL().get(tiny) == "https://github.com/alice/tiny"
        assert project.Stars().get(tiny) == 10
        assert project.Language().get(tiny) is Language.RUST
        assert project.IsFork().get(tiny) is False

    def test_missing_metadata_is_none(self, database):
        empty = _project(database, 4)
        assert project.Stars().get(empty) is None
        assert project.Language().get(empty) is None
        assert project.IsFork().accept(empty) is False

    def test_arbitrary_metadata_key(self, database):
        tiny = _project(database, 1)
        assert project.Metadata("topics").get(tiny) == "cli,parsing"
        assert project.Metadata("topics", convert=lambda v: v.split(",")).get(tiny) == ["cli", "parsing"]
        assert project.DefaultBranch().get(tiny) == "main"
        assert project.HasWiki().get(tiny) is True

    def test_unknown_metadata_key_is_none(self, database):
        tiny = _project(database, 1)
        assert project.Metadata("no_such_key").get(tiny) is None
        assert project.Metadata("topics").get(_project(database, 4)) is None
        assert project.Pushed().get(tiny) is None

    def test_metadata_needs_a_key(self):
        with pytest.raises(ValueError):
            project.Metadata()

    def test_named_metadata_repr_has_no_arguments(self):
        assert repr(project.Stars()) == "Stars()"
        assert repr(project.Metadata("topics")) == "Metadata('topics')"

    def test_is_fork_as_filter(self, database):
        forks = [p.item.id for p in database.projects().filter_by(project.IsFork())]
        assert forks == [ProjectId(2)]

    def test_collections(self, database):
        medium = _project(database, 2)
        assert project.CommitIds().count(medium) == 50
        assert [u.email for u in project.Authors().get(medium)] == [
            "alice@example.com",
            "bob@example.com",
        ]
        wrapped = project.Users().items(medium)
        assert all(w.data is database for w in wrapped)
        assert [p.location for p in project.Paths().get(_project(database, 1))] == [
            "src/main.rs",
            "README.md",
            "tools/build.py",
        ]

    def test_collection_group_key_is_a_tuple(self, database):
        medium = _project(database, 2)
        assert project.AuthorIds().select_key(medium) == (UserId(1), UserId(2))

    def test_age_and_max_experience(self, database):
        tiny = _project(database, 1)
        assert project.Age().get(tiny) == 4 * HOUR + 60
        assert project.MaxExperience().get(tiny) == 49 * HOUR + 60


class TestCommitAttributes:
    def test_fields(self, database):
        c = _commit(database, 2)
        assert commit.Hash().get(c) == f"{2:040x}"
        assert commit.AuthorId().get(c) == UserId(1)
        assert commit.Author().get(c).email == "alice@example.com"
        assert commit.Message().get(c) == "x" * 20
        assert commit.MessageLength().get(c) == 20

    def test_parents_and_changes(self, database):
        c = _commit(database, 2)
        assert commit.ParentIds().get(c) == [CommitId(1)]
        assert [p.id for p in commit.Parents().get(c)] == [CommitId(1)]
        assert commit.PathIds().get(c) == [PathId(2)]
        assert [p.location for p in commit.Paths().get(c)] == ["README.md"]
        assert Count(commit.Changes()).get(c) == 1

    def test_root_commit_has_no_parents(self, database):
        assert commit.Parents().get(_commit(database, 1)) == []

    def test_derivations(self, database):
        c = _commit(database, 5)
        assert commit.HistoryDepth().get(c) == 4
        assert commit.CumulativeChangeCount().get(c) == 5


class TestUserAndPathAttributes:
    def test_user(self, database):
        bob = _user(database, 2)
        assert user.Email().get(bob) == "bob@example.com"
        assert user.AuthoredCommitIds().count(bob) == 25
        assert user.AuthorExperience().get(bob) == 48 * HOUR
        assert user.Experience().get(bob) == 48 * HOUR + 60

    def test_path_language(self, database):
        languages = [path.Language().get(p) for p in database.paths()]
        assert languages == [Language.RUST, None, Language.PYTHON]
        assert path.Location().get(next(iter(database.paths()))) == "src/main.rs"


class TestStatistics:
    def test_median_of_message_lengths(self, database):
        """Five commits with messages of 10..50 characters."""
        median = Median(FromEach(project.Commits(), commit.MessageLength()))
        assert median.get(_project(database, 1)) == 30

    def test_median_of_even_count_is_mean_of_middle_pair(self, database):
        lengths = FromEach(project.Commits(), commit.MessageLength())
        median = Median(lengths)
        assert median.compute([10, 20, 30, 40]) == 25.0

    def test_statistics_of_empty_collection_are_none(self, database):
        """A project with no commits has no median, mean, min or max."""
        empty = _project(database, 4)
        lengths = FromEach(project.Commits(), commit.MessageLength())
        for statistic in (Median(lengths), Mean(lengths), Min(lengths), Max(lengths), MinMax(lengths)):
            assert statistic.get(empty) is None

    def test_min_max_mean(self, database):
        tiny = _project(database, 1)
        lengths = FromEach(project.Commits(), commit.MessageLength())
        assert Min(lengths).get(tiny) == 10
        assert Max(lengths).get(tiny) == 50
        assert MinMax(lengths).get(tiny) == (10, 50)
        assert Mean(lengths).get(tiny) == 30.0

    def test_count_and_length(self, database):
        tiny = _project(database, 1)
        assert Count(project.Commits()).get(tiny) == 5
        assert Count(project.Commits()).get(_project(database, 4)) == 0
        assert Length(project.URL()).get(tiny) == len("https://github.com/alice/tiny")

    def test_ratio(self, database):
        medium = _project(database, 2)
        assert Ratio(project.Authors(), project.Users()).get(medium) == 1.0
        assert Ratio(project.Authors(), project.Commits()).get(medium) == pytest.approx(2 / 50)

    def test_ratio_with_empty_population_is_none(self, database):
        assert Ratio(project.Authors(), project.Commits()).get(_project(database, 4)) is None

    def test_adapters_take_the_kind_of_their_attribute(self):
        assert Count(project.Commits()).object_kind is project.Commits.object_kind
        assert Median(FromEach(commit.Paths(), path.Location())).object_kind is commit.Paths.object_kind

    def test_count_rejects_attributes_without_a_size(self):
        with pytest.raises(TypeError):
            Count(project.Stars())


class TestComposition:
    def test_from_reaches_through_a_single_entity(self, database):
        experience = From(commit.Author(), user.AuthorExperience())
        assert experience.get(_commit(database, 1001)) == 998 * 24 * HOUR

    def test_from_each_if_filters_members(self, database):
        long_messages = FromEachIf(project.Commits(), AtLeast(commit.MessageLength(), 30))
        tiny = _project(database, 1)
        assert [c.id for c in long_messages.get(tiny)] == [CommitId(3), CommitId(4), CommitId(5)]
        assert long_messages.count(tiny) == 3
        assert long_messages.count(_project(database, 4)) == 0

    def test_select_returns_a_tuple_per_item(self, database):
        row = Select(project.Id(), project.Stars(), Count(project.Commits())).select(_project(database, 3))
        assert row == (ProjectId(3), 20, 500)

    def test_select_needs_attributes(self):
        with pytest.raises(ValueError):
            Select()
