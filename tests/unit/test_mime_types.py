"""
Unit tests for MIME kinds and the content-type table.
"""

import pytest

from minihttpd.http.mime_types import (
    CONTENT_TYPES,
    EXTENSIONS,
    MimeKind,
    get_content_type,
    is_binary,
    kind_for_name,
    split_extension,
)


class TestKindForName:
    """Tests for extension → MimeKind lookup."""

    @pytest.mark.parametrize("name, kind", [
        ("index.html", MimeKind.HTML),
        ("cat.gif", MimeKind.GIF),
        ("photo.jpeg", MimeKind.JPEG),
        ("song.mp3", MimeKind.MP3),
        ("paper.pdf", MimeKind.PDF),
    ])
    def test_recognized_extensions(self, name: str, kind: MimeKind):
        assert kind_for_name(name) is kind

    @pytest.mark.parametrize("name", [
        "notes.xyz",
        "README",
        ".profile",
        "trailing.",
        "photo.jpg",      # only "jpeg" is recognized
        "INDEX.HTML",     # matching is case-sensitive
        "page.Html",
    ])
    def test_unknown(self, name: str):
        assert kind_for_name(name) is MimeKind.UNKNOWN

    def test_last_dot_wins(self):
        """Test that only the final extension counts."""
        assert kind_for_name("report.html.pdf") is MimeKind.PDF
        assert kind_for_name("archive.pdf.gz") is MimeKind.UNKNOWN

    def test_subdirectory_names(self):
        assert kind_for_name("images/cat.gif") is MimeKind.GIF


class TestSplitExtension:
    """Tests for split_extension."""

    def test_split(self):
        assert split_extension("a.b.c") == ("a.b", "c")

    @pytest.mark.parametrize("name", ["noext", ".hidden", "dot."])
    def test_no_extension(self, name: str):
        assert split_extension(name) == (name, "")


class TestContentTypes:
    """Tests for the read-only content-type table."""

    def test_every_kind_has_a_content_type(self):
        assert set(CONTENT_TYPES) == set(MimeKind)

    @pytest.mark.parametrize("kind, content_type", [
        (MimeKind.HTML, "text/html"),
        (MimeKind.GIF, "image/gif"),
        (MimeKind.JPEG, "image/jpeg"),
        (MimeKind.MP3, "audio/mpeg"),
        (MimeKind.PDF, "application/pdf"),
        (MimeKind.UNKNOWN, "text/plain"),
    ])
    def test_content_type(self, kind: MimeKind, content_type: str):
        assert get_content_type(kind) == content_type

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            CONTENT_TYPES[MimeKind.HTML] = "text/plain"
        with pytest.raises(TypeError):
            EXTENSIONS["txt"] = MimeKind.HTML

    def test_transfer_mode(self):
        """HTML and UNKNOWN are text, the rest binary."""
        assert not is_binary(MimeKind.HTML)
        assert not is_binary(MimeKind.UNKNOWN)
        for kind in (MimeKind.GIF, MimeKind.JPEG, MimeKind.MP3, MimeKind.PDF):
            assert is_binary(kind)
