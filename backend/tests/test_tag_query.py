"""Tests for the TagQuery predicate and the filter_by_tags builder."""

from uuid import uuid4

from tagset import ContainsNone, ContainsTag, Document, TagQuery, filter_by_tags, taggable


@taggable(path="labels")
class Item(Document):
    title: str | None = None


class TestFilterByTags:
    def test_include_adds_one_condition_per_tag(self):
        query = filter_by_tags(TagQuery.all(), ["b", "c"], path="labels")

        assert query.conditions == (
            ContainsTag(path="labels", tag="b"),
            ContainsTag(path="labels", tag="c"),
        )

    def test_exclude_adds_a_single_condition(self):
        query = filter_by_tags(TagQuery.all(), None, ["a", "c"], path="labels")

        assert query.conditions == (ContainsNone(path="labels", tags=("a", "c")),)

    def test_empty_or_missing_lists_add_nothing(self):
        assert filter_by_tags(TagQuery.all(), [], [], path="labels").conditions == ()
        assert filter_by_tags(TagQuery.all(), None, None, path="labels").conditions == ()

    def test_does_not_mutate_the_input_query(self):
        base = TagQuery.where(title="A")

        filtered = filter_by_tags(base, ["a"], ["b"], path="labels")

        assert base.conditions == ()
        assert filtered is not base
        assert filtered.criteria == {"title": "A"}
        assert len(filtered.conditions) == 2

        filtered.criteria["title"] = "Z"
        assert base.criteria == {"title": "A"}

    def test_criteria_are_stored_in_json_form(self):
        doc_id = uuid4()

        query = Item.query(id=doc_id, title=None)

        assert query.criteria == {"id": str(doc_id), "title": None}
        assert Item.query(id=str(doc_id)).criteria == {"id": str(doc_id)}

    def test_results_can_be_chained(self):
        first = filter_by_tags(TagQuery.all(), ["a"], path="labels")
        second = filter_by_tags(first, ["b"], path="labels")

        assert [c.tag for c in second.conditions] == ["a", "b"]

    def test_default_path_is_tags(self):
        query = filter_by_tags(TagQuery.all(), ["a"])

        assert query.conditions[0].path == "tags"

    def test_model_classmethod_uses_the_declared_path(self):
        query = Item.filter_by_tags(Item.query(), ["a"], ["b"])

        assert {c.path for c in query.conditions} == {"labels"}


class TestMatches:
    def test_include_requires_every_tag(self):
        query = Item.filter_by_tags(Item.query(), ["b", "c"])

        assert query.matches({"labels": ["a", "b", "c"]})
        assert not query.matches({"labels": ["b"]})

    def test_exclude_rejects_any_listed_tag(self):
        query = Item.filter_by_tags(Item.query(), None, ["a", "c"])

        assert query.matches({"labels": ["b"]})
        assert query.matches({"labels": []})
        assert not query.matches({"labels": ["c", "b"]})

    def test_tag_in_both_lists_matches_nothing(self):
        query = Item.filter_by_tags(Item.query(), ["a"], ["a"])

        assert not query.matches({"labels": ["a"]})
        assert not query.matches({"labels": []})

    def test_criteria_are_exact_matches(self):
        query = Item.query(title="A")

        assert query.matches({"title": "A", "labels": []})
        assert not query.matches({"title": "B", "labels": []})

    def test_missing_tag_field_is_treated_as_empty(self):
        query = Item.filter_by_tags(Item.query(), None, ["a"])

        assert query.matches({"title": "A"})
