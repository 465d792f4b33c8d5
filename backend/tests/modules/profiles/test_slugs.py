"""Tests for slug generation."""

from modules.profiles.slugs import generate_unique_slug, random_slug, slugify


class TestSlugify:
    def test_basic(self):
        assert slugify("Jane", "Doe") == "jane-doe"

    def test_collapses_punctuation(self):
        assert slugify("  Mary-Jane ", "O'Neil!") == "mary-jane-o-neil"

    def test_skips_empty_parts(self):
        assert slugify(None, "Doe") == "doe"
        assert slugify("", None) == ""


class TestRandomSlug:
    def test_shape(self):
        slug = random_slug()
        assert slug.startswith("profile-")
        assert len(slug) == len("profile-") + 9


class TestGenerateUniqueSlug:
    def test_free_base(self):
        assert generate_unique_slug("Jane", "Doe", lambda s: False) == "jane-doe"

    def test_suffixes_until_free(self):
        taken = {"jane-doe", "jane-doe-1", "jane-doe-2"}
        assert generate_unique_slug("Jane", "Doe", taken.__contains__) == "jane-doe-3"

    def test_unusable_name_gets_random_slug(self):
        slug = generate_unique_slug("!!!", "???", lambda s: False)
        assert slug.startswith("profile-")

    def test_exhausted_suffixes_still_unique(self):
        slug = generate_unique_slug("Jane", "Doe", lambda s: s.startswith("jane-doe") and len(s) <= 13)
        assert slug.startswith("jane-doe-")
        assert len(slug) == len("jane-doe-") + 9
