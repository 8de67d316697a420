"""Tests for QueryFilter and list ordering."""

import pytest

from models import Member
from query import QueryFilter, sort_for_list


@pytest.fixture
def members():
    return [
        Member(id="1", name="Anna Lee", gender="female", generation=1),
        Member(id="2", name="Bob Lee", gender="male", generation=1),
        Member(id="3", name="Annabel", gender="female", generation=2),
        Member(id="4", name="Carl", gender="male", generation=2),
        Member(id="5", name="joANNa", gender="female", generation=3),
    ]


class TestQueryFilter:
    def test_empty_filter_matches_everything(self, members):
        assert QueryFilter().apply(members) == members

    def test_search_is_case_insensitive_substring(self, members):
        names = [m.name for m in QueryFilter(search="ann").apply(members)]
        assert names == ["Anna Lee", "Annabel", "joANNa"]

    def test_generation_exact(self, members):
        assert [m.id for m in QueryFilter(generation=2).apply(members)] == ["3", "4"]

    def test_gender_exact(self, members):
        assert [m.id for m in QueryFilter(gender="male").apply(members)] == ["2", "4"]

    def test_criteria_combine_as_intersection(self, members):
        combined = QueryFilter(search="ann", generation=2, gender="female").apply(members)
        separately = [
            m
            for m in members
            if m in QueryFilter(search="ann").apply(members)
            and m in QueryFilter(generation=2).apply(members)
            and m in QueryFilter(gender="female").apply(members)
        ]
        assert combined == separately
        assert [m.id for m in combined] == ["3"]

    def test_apply_does_not_modify_input(self, members):
        before = list(members)
        QueryFilter(gender="male").apply(members)
        assert members == before


class TestFromMapping:
    def test_empty_strings_are_no_ops(self):
        assert QueryFilter.from_mapping({"search": "", "generation": "", "gender": ""}) == QueryFilter()

    def test_none(self):
        assert QueryFilter.from_mapping(None) == QueryFilter()

    def test_generation_text(self):
        assert QueryFilter.from_mapping({"generation": "3"}).generation == 3

    def test_invalid_generation_dropped(self):
        assert QueryFilter.from_mapping({"generation": "x"}).generation is None


def test_sort_for_list(members):
    ordered = sort_for_list(reversed(members))
    assert [m.id for m in ordered] == ["1", "2", "3", "4", "5"]
