"""Tests for ids, entities and ItemWithData."""

import pytest

from histquery.objects import (
    Commit,
    CommitId,
    ItemWithData,
    Language,
    Path,
    PathId,
    Project,
    ProjectId,
    UserId,
)


class TestIdentity:
    def test_ids_print_as_bare_numbers(self):
        assert str(ProjectId(42)) == "42"
        assert int(CommitId(7)) == 7
        assert repr(UserId(3)) == "UserId(3)"

    def test_ids_are_ordered_within_a_kind(self):
        ids = [ProjectId(3), ProjectId(1), ProjectId(2)]
        assert sorted(ids) == [ProjectId(1), ProjectId(2), ProjectId(3)]

    def test_ids_of_different_kinds_are_not_equal(self):
        """Same number, different entity kind: distinct keys."""
        assert ProjectId(1) != CommitId(1)
        assert len({ProjectId(1), CommitId(1)}) == 2

    def test_ids_of_different_kinds_are_not_comparable(self):
        with pytest.raises(TypeError):
            ProjectId(1) < CommitId(2)

    def test_ids_are_hashable_keys(self):
        counts = {UserId(1): 3}
        assert counts[UserId(1)] == 3


class TestEntities:
    def test_entities_compare_by_value(self):
        assert Project(ProjectId(1), "u") == Project(ProjectId(1), "u")
        assert hash(Project(ProjectId(1), "u")) == hash(Project(ProjectId(1), "u"))

    def test_entities_are_immutable(self):
        commit = Commit(CommitId(1), "abc", UserId(1), UserId(1))
        with pytest.raises(AttributeError):
            commit.hash = "def"

    def test_path_language_from_extension(self):
        assert Path(PathId(1), "src/lib.rs").language is Language.RUST
        assert Path(PathId(2), "setup.PY").language is Language.PYTHON
        assert Path(PathId(3), "README").language is None


class TestLanguage:
    def test_parse_is_case_insensitive(self):
        assert Language.from_str("python") is Language.PYTHON
        assert Language.from_str("JavaScript") is Language.JAVASCRIPT
        assert Language.from_str(" c++ ") is Language.CPP

    def test_unknown_or_empty_names_give_none(self):
        assert Language.from_str("Brainfuck") is None
        assert Language.from_str("") is None
        assert Language.from_str(None) is None


class TestItemWithData:
    def test_equality_ignores_database_handle(self):
        """Two envelopes around the same entity are equal whatever their handle."""
        project = Project(ProjectId(1), "u")
        assert ItemWithData(object(), project) == ItemWithData(object(), project)
        assert hash(ItemWithData("a", project)) == hash(ItemWithData("b", project))

    def test_rewrap_shares_the_handle(self):
        handle = object()
        item = ItemWithData(handle, Project(ProjectId(1), "u"))
        other = item.rewrap(Project(ProjectId(2), "v"))
        assert other.data is handle
        assert other.id == ProjectId(2)
