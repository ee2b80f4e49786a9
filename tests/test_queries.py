"""Tests for the canned project queries."""

import pytest

from histquery import queries
from histquery.queries import QUERIES, TWO_YEARS


def _ids(stream):
    return [item.item.id.value for item in stream]


class TestCannedQueries:
    def test_stars(self, database):
        assert _ids(queries.stars(database)) == [2, 3, 1, 4]

    def test_issues_keeps_top_n(self, database):
        assert _ids(queries.issues(database, n=2)) == [3, 2]

    def test_commits(self, database):
        assert _ids(queries.commits(database, n=2)) == [3, 2]

    def test_message_sizes_ranks_by_median_message_length(self, database):
        """Project 1 messages are 10..50 characters long; the others about 10."""
        assert _ids(queries.message_sizes(database)) == [1, 3, 2, 4]

    def test_experienced_authors_requires_two_years(self, database):
        assert _ids(queries.experienced_authors(database)) == [3]

    def test_experienced_authors_with_lower_bar(self, database):
        assert _ids(queries.experienced_authors(database, experience=24 * 3600)) == [3, 2, 1]

    def test_experienced_authors_ratio(self, database):
        assert _ids(queries.experienced_authors_ratio(database)) == [3]

    def test_random_sample_follows_the_seed(self, database):
        picks = {tuple(_ids(queries.random_projects(database, n=2, seed=seed))) for seed in range(20)}
        assert len(picks) > 1
        assert all(len(pick) == 2 and list(pick) == sorted(pick) for pick in picks)
        assert _ids(queries.random_projects(database, n=2, seed=5)) == _ids(
            queries.random_projects(database, n=2, seed=5)
        )

    def test_seed_reaches_only_seeded_queries(self, database):
        canned = QUERIES["random"]
        assert canned.seeded
        assert list(canned.rows(database, 2, seed=3)) == list(canned.rows(database, 2, seed=3))
        assert list(QUERIES["stars"].rows(database, 2, seed=3)) == list(QUERIES["stars"].rows(database, 2))

    def test_queries_agree_with_or_without_cache(self, database, uncached_database):
        for name in QUERIES:
            cached = list(QUERIES[name].rows(database, 10))
            uncached = list(QUERIES[name].rows(uncached_database, 10))
            assert cached == uncached, name

    def test_second_run_reads_the_cache(self, source, cache_dir):
        from histquery.database import Database

        with Database(source, cache_dir) as first:
            expected = list(QUERIES["message_sizes"].rows(first, 10))
        with Database(source, cache_dir) as second:
            assert list(QUERIES["message_sizes"].rows(second, 10)) == expected


class TestRegistry:
    def test_registry_names_match(self):
        assert set(QUERIES) == {
            "stars",
            "issues",
            "buggy_issues",
            "commits",
            "message_sizes",
            "changes_in_commits",
            "experienced_authors",
            "experienced_authors_ratio",
            "random",
        }
        assert all(name == query.name for name, query in QUERIES.items())

    def test_rows_are_id_url_metric(self, database):
        rows = list(QUERIES["commits"].rows(database, 2))
        assert [(r[0].value, r[2]) for r in rows] == [(3, 500), (2, 50)]
        assert rows[0][1] == "https://github.com/carol/large"
        assert QUERIES["commits"].header == ["project_id", "url", "commits"]

    def test_missing_metric_is_none(self, database):
        rows = list(QUERIES["message_sizes"].rows(database, 10))
        assert rows[-1][0].value == 4
        assert rows[-1][2] is None

    @pytest.mark.parametrize("name", sorted(QUERIES))
    def test_every_query_has_a_description(self, name):
        assert QUERIES[name].description

    def test_two_years_in_seconds(self):
        assert TWO_YEARS == 730 * 24 * 3600
