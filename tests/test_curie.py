"""Tests for CURIE resolution."""

from triplestore.core.curie import is_absolute, resolve, set_mapping


FOAF = "http://xmlns.com/foaf/0.1/"


class TestIsAbsolute:
    """Tests for is_absolute."""

    def test_absolute(self):
        assert is_absolute("http://example.org/x")
        assert is_absolute("urn://thing")

    def test_not_absolute(self):
        assert not is_absolute("foaf:name")
        assert not is_absolute("mailto:bob@example.org")
        assert not is_absolute("Bob")


class TestResolve:
    """Tests for resolve."""

    def test_empty_and_none(self):
        """Absent tokens resolve to None."""
        assert resolve({"foaf": FOAF}, None) is None
        assert resolve({"foaf": FOAF}, "") is None

    def test_expands_known_prefix(self):
        assert resolve({"foaf": FOAF}, "foaf:name") == FOAF + "name"

    def test_absolute_bypasses_mapping(self):
        """Absolute IRIs are never split, even if the scheme is a bound prefix."""
        mapping = {"http": "urn:wrong:"}
        assert resolve(mapping, "http://example.org/x") == "http://example.org/x"

    def test_no_colon_unchanged(self):
        assert resolve({"foaf": FOAF}, "Bob") == "Bob"

    def test_unknown_prefix_unchanged(self):
        assert resolve({"foaf": FOAF}, "dc:title") == "dc:title"

    def test_splits_at_first_colon(self):
        mapping = {"ex": "http://example.org/"}
        assert resolve(mapping, "ex:a:b") == "http://example.org/a:b"

    def test_empty_local_part(self):
        assert resolve({"foaf": FOAF}, "foaf:") == FOAF

    def test_empty_iri_binding_falls_back(self):
        """A prefix bound to "" does not expand."""
        assert resolve({"ex": ""}, "ex:thing") == "ex:thing"

    def test_empty_prefix(self):
        mapping = {"": "http://default.org/"}
        assert resolve(mapping, ":thing") == "http://default.org/thing"

    def test_no_separator_inserted(self):
        mapping = {"ex": "http://example.org/ns#"}
        assert resolve(mapping, "ex:term") == "http://example.org/ns#term"


class TestSetMapping:
    """Tests for set_mapping."""

    def test_binds_and_overwrites(self):
        mapping = {}
        set_mapping(mapping, "ex", "http://one.org/")
        assert resolve(mapping, "ex:x") == "http://one.org/x"

        set_mapping(mapping, "ex", "http://two.org/")
        assert mapping == {"ex": "http://two.org/"}
        assert resolve(mapping, "ex:x") == "http://two.org/x"
