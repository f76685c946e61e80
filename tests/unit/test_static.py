"""
Unit tests for resource resolution.
"""

import os
from pathlib import Path

import pytest

from minihttpd.errors import UnsupportedMethod
from minihttpd.handlers.static import ResolvedResource, ResourceResolver, RootPolicy
from minihttpd.http.mime_types import MimeKind
from minihttpd.http.request import IncomingRequest
from minihttpd.http.status_codes import HTTPStatus


def get(path: str) -> IncomingRequest:
    return IncomingRequest(method="GET", path=path)


class TestRoot:
    """Tests for the "/" path."""

    def test_serve_policy(self, resolver: ResourceResolver, doc_root: Path):
        resource = resolver.resolve(get("/"))

        assert resource.status == HTTPStatus.OK
        assert resource.file_path == doc_root.resolve() / "index.html"
        assert resource.mime_kind is MimeKind.HTML
        assert resource.location is None

    def test_redirect_policy(self, doc_root: Path):
        resolver = ResourceResolver(doc_root, root_policy=RootPolicy.REDIRECT)
        resource = resolver.resolve(get("/"))

        assert resource.status == HTTPStatus.MOVED_PERMANENTLY
        assert resource.file_path == doc_root.resolve() / "index.html"
        assert resource.mime_kind is MimeKind.HTML
        assert resource.location == "/index.html"

    def test_policy_accepts_string(self, doc_root: Path):
        resolver = ResourceResolver(doc_root, root_policy="redirect")
        assert resolver.root_policy is RootPolicy.REDIRECT

    def test_root_never_looked_up_on_disk(self, tmp_path: Path):
        """Even without a default document on disk, "/" resolves to it."""
        resolver = ResourceResolver(tmp_path, default_document="home.html")
        resource = resolver.resolve(get("/"))

        assert resource.status == HTTPStatus.OK
        assert resource.file_path == tmp_path.resolve() / "home.html"


class TestFiles:
    """Tests for regular file requests."""

    @pytest.mark.parametrize("ext, kind", [
        ("html", MimeKind.HTML),
        ("gif", MimeKind.GIF),
        ("jpeg", MimeKind.JPEG),
        ("mp3", MimeKind.MP3),
        ("pdf", MimeKind.PDF),
    ])
    def test_existing_file(self, resolver: ResourceResolver, doc_root: Path, ext: str, kind: MimeKind):
        (doc_root / f"name.{ext}").write_bytes(b"data")

        resource = resolver.resolve(get(f"/name.{ext}"))

        assert resource.status == HTTPStatus.OK
        assert resource.mime_kind is kind
        assert resource.file_path == doc_root.resolve() / f"name.{ext}"

    @pytest.mark.parametrize("ext", ["html", "gif", "jpeg", "mp3", "pdf"])
    def test_missing_file(self, resolver: ResourceResolver, doc_root: Path, ext: str):
        resource = resolver.resolve(get(f"/name.{ext}"))

        assert resource.status == HTTPStatus.NOT_FOUND
        assert resource.mime_kind is MimeKind.HTML
        assert resource.file_path == doc_root.resolve() / "404.html"

    def test_unknown_extension(self, resolver: ResourceResolver, doc_root: Path):
        (doc_root / "name.xyz").write_text("hello")

        resource = resolver.resolve(get("/name.xyz"))

        assert resource.status == HTTPStatus.OK
        assert resource.mime_kind is MimeKind.UNKNOWN

    @pytest.mark.parametrize("name", ["Makefile", ".hidden", "trailing."])
    def test_names_without_usable_extension(self, resolver: ResourceResolver, doc_root: Path, name: str):
        """The candidate name is used verbatim and served as text."""
        (doc_root / name).write_text("content")

        resource = resolver.resolve(get("/" + name))

        assert resource.status == HTTPStatus.OK
        assert resource.mime_kind is MimeKind.UNKNOWN
        assert resource.file_path == doc_root.resolve() / name

    def test_extension_case_sensitive(self, resolver: ResourceResolver, doc_root: Path):
        (doc_root / "PAGE.HTML").write_text("<p>hi</p>")
        assert resolver.resolve(get("/PAGE.HTML")).mime_kind is MimeKind.UNKNOWN

    def test_subdirectory(self, resolver: ResourceResolver, doc_root: Path):
        (doc_root / "img").mkdir()
        (doc_root / "img" / "cat.gif").write_bytes(b"GIF89a")

        resource = resolver.resolve(get("/img/cat.gif"))

        assert resource.status == HTTPStatus.OK
        assert resource.mime_kind is MimeKind.GIF

    def test_directory_is_not_a_file(self, resolver: ResourceResolver, doc_root: Path):
        (doc_root / "docs").mkdir()
        assert resolver.resolve(get("/docs")).status == HTTPStatus.NOT_FOUND

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions, non-root")
    def test_unreadable_file(self, resolver: ResourceResolver, doc_root: Path):
        secret = doc_root / "secret.html"
        secret.write_text("x")
        secret.chmod(0)
        try:
            assert resolver.resolve(get("/secret.html")).status == HTTPStatus.NOT_FOUND
        finally:
            secret.chmod(0o644)


class TestContainment:
    """Tests that requests cannot leave the document root."""

    @pytest.mark.parametrize("path", [
        "/../outside.html",
        "/img/../../outside.html",
        "//etc/passwd",
    ])
    def test_escape_is_not_found(self, tmp_path: Path, path: str):
        root = tmp_path / "www"
        root.mkdir()
        (root / "404.html").write_text("nf")
        (tmp_path / "outside.html").write_text("secret")

        resource = ResourceResolver(root).resolve(get(path))

        assert resource.status == HTTPStatus.NOT_FOUND
        assert resource.file_path == root.resolve() / "404.html"

    def test_null_byte_is_not_found(self, resolver: ResourceResolver):
        assert resolver.resolve(get("/a\x00.html")).status == HTTPStatus.NOT_FOUND


class TestErrors:
    """Tests for unsupported methods and bad requests."""

    @pytest.mark.parametrize("method", ["POST", "HEAD", "PUT", "get"])
    def test_non_get_rejected(self, resolver: ResourceResolver, method: str):
        with pytest.raises(UnsupportedMethod) as exc_info:
            resolver.resolve(IncomingRequest(method=method, path="/"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.method == method

    def test_bad_request_without_document(self, resolver: ResourceResolver):
        resource = resolver.bad_request()

        assert resource.status == HTTPStatus.BAD_REQUEST
        assert resource.file_path is None
        assert resource.mime_kind is MimeKind.UNKNOWN

    def test_bad_request_with_document(self, doc_root: Path):
        resolver = ResourceResolver(doc_root, bad_request_document="400.html")
        resource = resolver.bad_request()

        assert resource.status == HTTPStatus.BAD_REQUEST
        assert resource.file_path == doc_root.resolve() / "400.html"
        assert resource.mime_kind is MimeKind.HTML

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(ValueError):
            ResourceResolver(tmp_path / "nope")


class TestResolvedResource:
    """Tests for ResolvedResource invariants."""

    def test_not_found_must_be_html(self, tmp_path: Path):
        with pytest.raises(ValueError):
            ResolvedResource(tmp_path / "404.html", MimeKind.PDF, HTTPStatus.NOT_FOUND)

    def test_redirect_needs_location(self, tmp_path: Path):
        with pytest.raises(ValueError):
            ResolvedResource(tmp_path / "index.html", MimeKind.HTML, HTTPStatus.MOVED_PERMANENTLY)

    def test_is_binary(self, tmp_path: Path):
        assert ResolvedResource(tmp_path / "a.gif", MimeKind.GIF, HTTPStatus.OK).is_binary
        assert not ResolvedResource(tmp_path / "a.txt", MimeKind.UNKNOWN, HTTPStatus.OK).is_binary

    def test_fresh_per_request(self, resolver: ResourceResolver):
        first = resolver.resolve(get("/"))
        second = resolver.resolve(get("/"))
        assert first == second
        assert first is not second


class TestUnresolvableNames:
    """Names the filesystem refuses outright are answered like missing files."""

    def test_overlong_name_is_not_found(self, resolver: ResourceResolver, doc_root: Path):
        resource = resolver.resolve(get("/" + "a" * 300 + ".html"))

        assert resource.status == HTTPStatus.NOT_FOUND
        assert resource.file_path == doc_root.resolve() / "404.html"

    def test_overlong_directory_component_is_not_found(self, resolver: ResourceResolver):
        resource = resolver.resolve(get("/" + "d" * 300 + "/page.html"))
        assert resource.status == HTTPStatus.NOT_FOUND

    @pytest.mark.skipif(os.name != "posix", reason="needs symlinks")
    def test_symlink_loop_is_not_found(self, resolver: ResourceResolver, doc_root: Path):
        (doc_root / "loop_a.html").symlink_to(doc_root / "loop_b.html")
        (doc_root / "loop_b.html").symlink_to(doc_root / "loop_a.html")

        assert resolver.resolve(get("/loop_a.html")).status == HTTPStatus.NOT_FOUND
