"""Tests for upload set construction and accessors."""

import pytest

from uploadfiles.models.core import FileEntry, UploadConfig
from uploadfiles.services.upload_set import UploadSet, build_upload_set

UNIQUE = UploadConfig(unique=True)
PLAIN = UploadConfig()


# -----------------------------------------------------------------------------
# Construction Tests
# -----------------------------------------------------------------------------


class TestBuildUploadSet:
    """Tests for build_upload_set."""

    @pytest.mark.parametrize("fields", [None, {}])
    def test_unparsed_request_gives_empty_set(self, fields) -> None:
        """Verify missing multipart data yields an empty, valid set."""
        upload_set = build_upload_set(fields, UNIQUE)

        assert not upload_set
        assert upload_set.count == 0
        assert upload_set.size == 0
        assert upload_set.files == {}
        assert upload_set.duplicates == ()
        assert upload_set.get("file") is None

    def test_keeps_field_and_entry_order(self, make_descriptor) -> None:
        """Verify fields and entries keep their submission order."""
        fields = {
            "z": [make_descriptor("3.txt"), make_descriptor("1.txt")],
            "a": [make_descriptor("2.txt")],
        }
        upload_set = build_upload_set(fields, PLAIN)

        assert upload_set.keys() == ["z", "a"]
        assert [entry.filename for entry in upload_set.entries("z")] == ["3.txt", "1.txt"]

    def test_entries_reference_descriptors(self, make_descriptor, opened_streams) -> None:
        """Verify entries wrap descriptors without opening content."""
        descriptor = make_descriptor("a.txt", b"hello")
        upload_set = build_upload_set({"doc": [descriptor]}, PLAIN)

        entry = upload_set.get("doc")
        assert isinstance(entry, FileEntry)
        assert entry.descriptor is descriptor
        assert entry.field == "doc"
        assert opened_streams == []

    def test_duplicates_across_fields(self, make_descriptor) -> None:
        """Verify the first dup.txt wins and later ones are recorded."""
        fields = {
            "first": [make_descriptor("dup.txt", b"one")],
            "second": [make_descriptor("dup.txt", b"two"), make_descriptor("other.txt")],
        }
        upload_set = build_upload_set(fields, UNIQUE)

        names = [entry.filename for _, entries in upload_set for entry in entries]
        assert names.count("dup.txt") == 1
        assert upload_set.get("first").read() == b"one"
        assert set(upload_set.duplicates) == {"dup.txt"}

    def test_duplicates_within_field(self, make_descriptor) -> None:
        """Verify repeats inside one field are dropped too."""
        fields = {"file": [make_descriptor("x.txt"), make_descriptor("x.txt"), make_descriptor("x.txt")]}
        upload_set = build_upload_set(fields, UNIQUE)

        assert upload_set.count == 1
        assert upload_set.duplicates == ("x.txt",)

    def test_uniqueness_disabled_keeps_everything(self, make_descriptor) -> None:
        """Verify no dedup happens without the unique flag."""
        fields = {"a": [make_descriptor("dup.txt")], "b": [make_descriptor("dup.txt")]}
        upload_set = build_upload_set(fields, PLAIN)

        assert upload_set.count == 2
        assert upload_set.duplicates == ()

    def test_field_emptied_by_dedup_is_kept(self, make_descriptor) -> None:
        """Verify a field whose files were all duplicates maps to an empty list."""
        fields = {"a": [make_descriptor("dup.txt")], "b": [make_descriptor("dup.txt")]}
        upload_set = build_upload_set(fields, UNIQUE)

        assert upload_set.keys() == ["a", "b"]
        assert upload_set.entries("b") == []
        assert upload_set.get("b") is None

    def test_empty_input_field_is_skipped(self, make_descriptor) -> None:
        """Verify fields submitted without files produce no key."""
        upload_set = build_upload_set({"empty": [], "file": [make_descriptor("a.txt")]}, UNIQUE)

        assert upload_set.keys() == ["file"]

    def test_dedup_is_idempotent(self, make_descriptor) -> None:
        """Verify rebuilding from surviving entries gives the same set without duplicates."""
        fields = {
            "a": [make_descriptor("x.txt"), make_descriptor("y.txt")],
            "b": [make_descriptor("x.txt"), make_descriptor("z.txt")],
        }
        first = build_upload_set(fields, UNIQUE)
        second = build_upload_set(first.descriptors(), UNIQUE)

        assert second.duplicates == ()
        assert second.files == first.files

    def test_rebuild_drops_field_emptied_by_dedup(self, make_descriptor) -> None:
        """Verify a field emptied by dedup disappears on rebuild while the entries stay the same."""
        fields = {"a": [make_descriptor("dup.txt")], "b": [make_descriptor("dup.txt")]}
        first = build_upload_set(fields, UNIQUE)
        second = build_upload_set(first.descriptors(), UNIQUE)

        assert first.keys() == ["a", "b"]
        assert first.descriptors()["b"] == []
        assert second.keys() == ["a"]
        assert second.duplicates == ()
        assert second.entries("a") == first.entries("a")
        assert (second.count, second.size) == (first.count, first.size)


# -----------------------------------------------------------------------------
# Accessor Tests
# -----------------------------------------------------------------------------


class TestUploadSetAccessors:
    """Tests for UploadSet accessors."""

    def test_size_is_sum_of_declared_sizes(self, sized_fields) -> None:
        """Verify total size equals the sum of entry sizes."""
        upload_set = build_upload_set(sized_fields, PLAIN)

        assert upload_set.size == 30
        assert upload_set.size == sum(e.size for _, entries in upload_set for e in entries)

    def test_count(self, sized_fields) -> None:
        """Verify count spans every field."""
        assert build_upload_set(sized_fields, PLAIN).count == 3

    def test_get_returns_first_entry(self, make_descriptor) -> None:
        """Verify get returns the first entry of a field."""
        upload_set = build_upload_set({"f": [make_descriptor("1.txt"), make_descriptor("2.txt")]}, PLAIN)

        assert upload_set.get("f").filename == "1.txt"
        assert len(upload_set.entries("f")) == 2
        assert upload_set.entries("missing") == []

    def test_default_upload_set_is_empty(self) -> None:
        """Verify a bare UploadSet is falsy."""
        assert not UploadSet()
        assert "count=0" in repr(UploadSet())
