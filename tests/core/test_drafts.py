"""
Test suite for draft merging and image URL normalization.

System role: Verification of progress merge semantics
"""

from backend.core.drafts import (
    find_discouraged_keys,
    merge_draft,
    normalize_draft_image_urls,
    normalize_image_url,
)


class TestMergeDraft:
    """Test suite for merge_draft()."""

    def test_patch_keys_should_replace_and_absent_keys_survive(self) -> None:
        stored = {"images": [{"image_id": "a"}], "demographics": {"gender": "f"}}

        merged = merge_draft(stored, {"images": [{"image_id": "b"}]})

        assert merged == {"images": [{"image_id": "b"}], "demographics": {"gender": "f"}}

    def test_merge_should_be_shallow(self) -> None:
        stored = {"demographics": {"gender": "f", "age_group": "18-24"}}

        merged = merge_draft(stored, {"demographics": {"gender": "m"}})

        assert merged == {"demographics": {"gender": "m"}}

    def test_same_patch_twice_should_equal_once(self) -> None:
        stored = {"a": 1, "b": {"x": 1}}
        patch = {"b": {"y": 2}, "c": [3]}

        once = merge_draft(stored, patch)
        twice = merge_draft(once, patch)

        assert once == twice

    def test_inputs_should_not_be_mutated(self) -> None:
        stored = {"a": 1}
        patch = {"b": 2}

        merge_draft(stored, patch)

        assert stored == {"a": 1}
        assert patch == {"b": 2}

    def test_none_inputs_should_yield_empty_draft(self) -> None:
        assert merge_draft(None, None) == {}


class TestNormalizeImageUrls:
    """Test suite for image URL normalization."""

    def test_absolute_url_should_be_reduced_to_prefixed_path(self) -> None:
        value = "https://cdn.example.org/static/images_v1/Health_medical/x.jpg?v=2#top"

        assert normalize_image_url(value) == "/images_v1/Health_medical/x.jpg?v=2"

    def test_already_relative_url_should_be_kept(self) -> None:
        assert normalize_image_url("  /images_v1/a/b.jpg ") == "/images_v1/a/b.jpg"

    def test_foreign_url_and_non_strings_should_pass_through(self) -> None:
        assert normalize_image_url("https://other.org/x.jpg") == "https://other.org/x.jpg"
        assert normalize_image_url(42) == 42

    def test_draft_entries_should_be_rewritten_for_every_url_key(self) -> None:
        draft = {
            "images": [
                {"imageUrl": "http://h/images_v1/A/1.jpg"},
                {"image_url": "http://h/images_v1/A/2.jpg", "src": "http://h/images_v1/A/3.jpg"},
                "not-a-dict",
            ],
            "other": True,
        }

        normalized = normalize_draft_image_urls(draft)

        assert normalized["images"][0] == {"imageUrl": "/images_v1/A/1.jpg"}
        assert normalized["images"][1] == {
            "image_url": "/images_v1/A/2.jpg",
            "src": "/images_v1/A/3.jpg",
        }
        assert normalized["images"][2] == "not-a-dict"
        assert normalized["other"] is True
        assert draft["images"][0]["imageUrl"] == "http://h/images_v1/A/1.jpg"

    def test_unchanged_draft_should_be_returned_as_is(self) -> None:
        draft = {"images": [{"image_id": "a", "src": "/images_v1/A/a.jpg"}]}

        assert normalize_draft_image_urls(draft) is draft
        assert normalize_draft_image_urls(None) is None

    def test_custom_prefix_should_be_honoured(self) -> None:
        draft = {"images": [{"src": "https://h/images_v2/A/a.jpg"}]}

        normalized = normalize_draft_image_urls(draft, prefix="/images_v2/")

        assert normalized["images"][0]["src"] == "/images_v2/A/a.jpg"


class TestFindDiscouragedKeys:
    def test_identity_keys_in_envelope_or_draft_should_be_reported(self) -> None:
        keys = find_discouraged_keys({"session_id": "x", "stage": "annotate"}, {"context": "c"})

        assert keys == ["session_id", "context"]

    def test_clean_patch_should_report_nothing(self) -> None:
        assert find_discouraged_keys({"stage": "annotate"}, {"images": []}) == []
        assert find_discouraged_keys(None, None) == []
