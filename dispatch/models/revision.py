"""
Revision records in the shape of the ``prop=revisions`` API module, plus the
"expanded" form which also carries the page identity, the size difference to
the parent revision and the rendered edit summary.

A revision that could not be looked up is represented by
:py:class:`MissingRevision` (the ID does not resolve, or the user cannot see
it) or :py:class:`InvalidRevision` (the ID itself is malformed).
"""

from dataclasses import dataclass, field
from typing import Any, Literal, TypeGuard

from .log import api_flag

__all__ = [
    "RevisionVisibility",
    "RevisionData",
    "PageIdentity",
    "ExpandedRevision",
    "MissingRevision",
    "InvalidRevision",
    "Revision",
    "is_missing_revision",
    "is_invalid_revision",
    "is_valid_revision",
    "revision_from_api",
]


@dataclass(frozen=True)
class RevisionVisibility:
    comment: bool = False
    text: bool = False
    user: bool = False

    @classmethod
    def from_api(cls, value: dict[str, Any] | None) -> "RevisionVisibility | None":
        if value is None:
            return None
        return cls(
            comment=api_flag(value, "comment"),
            text=api_flag(value, "text"),
            user=api_flag(value, "user"),
        )

    def to_api(self) -> dict[str, bool]:
        return {"comment": self.comment, "text": self.text, "user": self.user}


@dataclass(frozen=True, kw_only=True)
class RevisionData:
    revid: int
    parentid: int
    minor: bool
    # None when hidden by revision deletion
    user: str | None
    # ISO 8601
    timestamp: str
    size: int | None
    # None when hidden by revision deletion
    comment: str | None
    tags: list[str] = field(default_factory=list)
    visibility: RevisionVisibility | None = None

    # revision deletion flags
    commenthidden: bool = False
    userhidden: bool = False
    texthidden: bool = False
    suppressed: bool = False

    def to_api(self) -> dict[str, Any]:
        api_entry: dict[str, Any] = {
            "revid": self.revid,
            "parentid": self.parentid,
            "minor": self.minor,
            "user": self.user,
            "timestamp": self.timestamp,
            "size": self.size,
            "comment": self.comment,
            "tags": list(self.tags),
        }
        if self.visibility is not None:
            api_entry["visibility"] = self.visibility.to_api()
        for flag in ("commenthidden", "userhidden", "texthidden", "suppressed"):
            if getattr(self, flag):
                api_entry[flag] = True
        return api_entry


@dataclass(frozen=True)
class PageIdentity:
    pageid: int
    ns: int
    title: str

    def to_api(self) -> dict[str, Any]:
        return {"pageid": self.pageid, "ns": self.ns, "title": self.title}


@dataclass(frozen=True, kw_only=True)
class ExpandedRevision(RevisionData):
    page: PageIdentity
    # size difference to the parent revision in bytes
    diffsize: int
    # HTML rendering of the edit summary, filled in by a comment parser
    parsedcomment: str | None = None

    def to_api(self) -> dict[str, Any]:
        api_entry = super().to_api()
        api_entry["page"] = self.page.to_api()
        api_entry["diffsize"] = self.diffsize
        if self.parsedcomment is not None:
            api_entry["parsedcomment"] = self.parsedcomment
        return api_entry


@dataclass(frozen=True)
class MissingRevision:
    revid: int
    missing: Literal[True] = True

    def to_api(self) -> dict[str, Any]:
        return {"revid": self.revid, "missing": True}


@dataclass(frozen=True)
class InvalidRevision:
    revid: int
    invalid: Literal[True] = True

    def to_api(self) -> dict[str, Any]:
        return {"revid": self.revid, "invalid": True}


type Revision = ExpandedRevision | MissingRevision | InvalidRevision


def is_missing_revision(revision: Revision) -> TypeGuard[MissingRevision]:
    return isinstance(revision, MissingRevision)


def is_invalid_revision(revision: Revision) -> TypeGuard[InvalidRevision]:
    return isinstance(revision, InvalidRevision)


def is_valid_revision(revision: Revision) -> TypeGuard[ExpandedRevision]:
    """
    :returns: ``True`` if the revision is neither missing nor invalid.
    """
    return isinstance(revision, ExpandedRevision)


def revision_from_api(entry: dict[str, Any], page: dict[str, Any] | None = None) -> Revision:
    """
    Create a revision record from an API revision object.

    :param entry:
        the revision object. ``missing`` and ``invalid`` entries produce
        :py:class:`MissingRevision` and :py:class:`InvalidRevision`.
    :param page:
        the page object (``pageid``, ``ns``, ``title``) the revision belongs
        to. Used when ``entry`` does not contain the ``page`` key itself, which
        is the case for revisions nested under a page in ``query`` results.
    :raises ValueError: when the page identity or ``diffsize`` is not available
    """
    if api_flag(entry, "invalid"):
        return InvalidRevision(revid=entry.get("revid", 0))
    if api_flag(entry, "missing"):
        return MissingRevision(revid=entry["revid"])

    page = entry.get("page", page)
    if page is None:
        raise ValueError(f"revision {entry.get('revid')} has no page information")
    if "diffsize" not in entry:
        raise ValueError(f"revision {entry.get('revid')} has no diffsize")

    visibility = RevisionVisibility.from_api(entry.get("visibility"))
    return ExpandedRevision(
        revid=entry["revid"],
        parentid=entry.get("parentid", 0),
        minor=api_flag(entry, "minor"),
        user=entry.get("user"),
        timestamp=entry["timestamp"],
        size=entry.get("size"),
        comment=entry.get("comment"),
        tags=list(entry.get("tags", [])),
        visibility=visibility,
        commenthidden=api_flag(entry, "commenthidden"),
        userhidden=api_flag(entry, "userhidden"),
        # sha1hidden is what the database selects produce when the text is hidden
        texthidden=api_flag(entry, "texthidden") or api_flag(entry, "sha1hidden"),
        suppressed=api_flag(entry, "suppressed"),
        page=PageIdentity(pageid=page["pageid"], ns=page["ns"], title=page["title"]),
        diffsize=entry["diffsize"],
        parsedcomment=entry.get("parsedcomment"),
    )
