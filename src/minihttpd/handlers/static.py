"""
=============================================================================
RESOURCE RESOLUTION
=============================================================================

Maps a parsed request onto a concrete local file, a MimeKind and a status
code. The result is a ResolvedResource, created fresh for every request.

=============================================================================
RESOLUTION RULES (applied in order)
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  1. method != GET            → UnsupportedMethod (answered with 400)│
    │                                                                     │
    │  2. path == "/"              → default document, HTML               │
    │                                200 (serve policy) or 301 (redirect) │
    │                                no filesystem lookup on "/" itself   │
    │                                                                     │
    │  3. strip the leading "/"    → candidate name                       │
    │     kind from the extension after the LAST dot                      │
    │     (no dot, leading dot, trailing dot → UNKNOWN)                   │
    │                                                                     │
    │  4. candidate is a readable  → 200, candidate, kind                 │
    │     file inside root_dir                                            │
    │                                                                     │
    │  5. otherwise                → 404, not-found document, HTML        │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SECURITY
=============================================================================

The candidate is resolved (following ".." and symlinks) and must still be
inside root_dir. "/../etc/passwd" and "//etc/passwd" are answered exactly
like a missing file: 404 with the not-found document.

=============================================================================
"""

import os
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..errors import UnsupportedMethod
from ..http.mime_types import MimeKind, kind_for_name, is_binary
from ..http.request import IncomingRequest
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class RootPolicy(Enum):
    """How a request for "/" is answered."""

    SERVE = "serve"         # 200 with the default document
    REDIRECT = "redirect"   # 301 pointing at the default document


@dataclass(frozen=True)
class ResolvedResource:
    """
    The file, kind and status chosen for one request.

    Attributes:
        file_path:  Local file to send as the body. None means no body
                    (a 400 without a configured bad-request document).
        mime_kind:  Drives the headers and the transfer mode.
        status:     One of 200, 301, 400, 404.
        location:   Redirect target for 301 responses.
    """

    file_path: Optional[Path]
    mime_kind: MimeKind
    status: HTTPStatus
    location: Optional[str] = None

    def __post_init__(self):
        if self.status == HTTPStatus.NOT_FOUND and self.mime_kind is not MimeKind.HTML:
            raise ValueError("Not-found responses are always rendered as HTML")
        if self.status == HTTPStatus.MOVED_PERMANENTLY and not self.location:
            raise ValueError("Redirect responses need a location")

    @property
    def is_binary(self) -> bool:
        """True when the body is sent in binary chunks."""
        return is_binary(self.mime_kind)


class ResourceResolver:
    """
    Resolves requests against a document root.

    =========================================================================
    USAGE
    =========================================================================

        resolver = ResourceResolver(
            root_dir="/var/www",
            default_document="index.html",
            not_found_document="404.html",
        )

        resource = resolver.resolve(request)
        # ResolvedResource(file_path=PosixPath('/var/www/cat.gif'),
        #                  mime_kind=<MimeKind.GIF: 'gif'>,
        #                  status=<HTTPStatus.OK: 200>)

    Configured documents are relative to root_dir unless given as
    absolute paths.

    =========================================================================
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        default_document: Union[str, Path] = "index.html",
        not_found_document: Union[str, Path] = "404.html",
        root_policy: RootPolicy = RootPolicy.SERVE,
        bad_request_document: Optional[Union[str, Path]] = None,
    ):
        """
        Args:
            root_dir: Directory request paths are resolved against.
            default_document: Served for "/".
            not_found_document: Served when the requested file is missing.
            root_policy: Serve "/" directly (200) or redirect it (301).
            bad_request_document: Optional HTML body for 400 responses.

        Raises:
            ValueError: If root_dir is not a directory.
        """
        self.root_dir = Path(root_dir).resolve()
        if not self.root_dir.is_dir():
            raise ValueError(f"Document root does not exist: {root_dir}")

        self.default_document = self.root_dir / default_document
        self.not_found_document = self.root_dir / not_found_document
        self.bad_request_document = (
            self.root_dir / bad_request_document if bad_request_document else None
        )
        self.root_policy = RootPolicy(root_policy)

        for document in (self.default_document, self.not_found_document, self.bad_request_document):
            if document is not None and not document.is_file():
                logger.warning(f"Configured document is missing: {document}")

    def resolve(self, request: IncomingRequest) -> ResolvedResource:
        """
        Resolve a request to the resource that answers it.

        Raises:
            UnsupportedMethod: If the method is not GET.
        """
        if request.method != "GET":
            raise UnsupportedMethod(request.method)

        # ─────────────────────────────────────────────────────────────────
        # ROOT: never looked up on disk
        # ─────────────────────────────────────────────────────────────────
        if request.path == "/":
            return self._root()

        # ─────────────────────────────────────────────────────────────────
        # REGULAR FILE
        # ─────────────────────────────────────────────────────────────────
        name = request.path[1:]
        kind = kind_for_name(name)
        candidate = self._candidate(name)

        if candidate is not None and self._is_readable_file(candidate):
            return ResolvedResource(candidate, kind, HTTPStatus.OK)

        logger.debug(f"Not found: {request.path}")
        return self.not_found()

    def not_found(self) -> ResolvedResource:
        """The 404 resource: not-found document, always HTML."""
        return ResolvedResource(self.not_found_document, MimeKind.HTML, HTTPStatus.NOT_FOUND)

    def bad_request(self) -> ResolvedResource:
        """
        The 400 resource.

        Uses the bad-request document as an HTML body when one is
        configured, otherwise a plain-text response with no body.
        """
        if self.bad_request_document is not None:
            return ResolvedResource(self.bad_request_document, MimeKind.HTML, HTTPStatus.BAD_REQUEST)
        return ResolvedResource(None, MimeKind.UNKNOWN, HTTPStatus.BAD_REQUEST)

    def _root(self) -> ResolvedResource:
        if self.root_policy is RootPolicy.REDIRECT:
            return ResolvedResource(
                self.default_document,
                MimeKind.HTML,
                HTTPStatus.MOVED_PERMANENTLY,
                location="/" + self.default_document.name,
            )
        return ResolvedResource(self.default_document, MimeKind.HTML, HTTPStatus.OK)

    def _candidate(self, name: str) -> Optional[Path]:
        """
        Join the candidate name onto root_dir, refusing anything that
        resolves outside it or cannot be resolved at all (over-long
        names, symlink loops).
        """
        if "\x00" in name:
            return None

        try:
            full_path = (self.root_dir / name).resolve()
        except (OSError, RuntimeError) as e:
            logger.debug(f"Cannot resolve {name!r}: {e}")
            return None

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path escapes document root: {name!r}")
            return None
        return full_path

    @staticmethod
    def _is_readable_file(path: Path) -> bool:
        try:
            return path.is_file() and os.access(path, os.R_OK)
        except OSError as e:
            logger.debug(f"Cannot stat {path}: {e}")
            return False
