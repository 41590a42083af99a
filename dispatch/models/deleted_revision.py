"""
Classification of revisions affected by revision deletion.

A revision may have its user, its edit summary and its content hidden, in any
combination. :py:func:`resolve_revision` turns an :py:class:`ExpandedRevision
<dispatch.models.revision.ExpandedRevision>` with some of the ``*hidden``
flags set into the matching :py:class:`DeletedRevision` subclass:

=================================  ========================  =================
class                              hidden flags              redacted fields
=================================  ========================  =================
:py:class:`UserDeletedRevision`    ``userhidden``            ``user``
:py:class:`CommentDeletedRevision` ``commenthidden``         ``comment``, ``parsedcomment``
:py:class:`TextDeletedRevision`    ``texthidden``            revision content
=================================  ========================  =================

Revisions with more than one hidden part get a combined class which derives
from every matching single class, e.g. :py:class:`UserCommentDeletedRevision`
is both a :py:class:`UserDeletedRevision` and a
:py:class:`CommentDeletedRevision`.

The ``deleted`` attribute holds the ``delete/revision`` log entry which hid
the parts of the revision, or ``True`` when no such entry could be found
(e.g. because of its age or ambiguity) or when the entry does not agree with
the revision's flags.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Iterable, Literal, TypeGuard

from .log import LogEntry, RevisionDeletionInfo
from .revision import ExpandedRevision, InvalidRevision, MissingRevision, Revision

logger = logging.getLogger(__name__)

__all__ = [
    "DeletedRevision",
    "UserDeletedRevision",
    "CommentDeletedRevision",
    "TextDeletedRevision",
    "UserCommentDeletedRevision",
    "UserTextDeletedRevision",
    "CommentTextDeletedRevision",
    "UserCommentTextDeletedRevision",
    "hidden_dimensions",
    "resolve_revision",
    "is_revision_user_hidden",
    "is_revision_comment_hidden",
    "is_revision_text_hidden",
    "deleted_dimensions",
    "find_deletion_info",
]

# names of the hideable parts, equal to the attributes of ChangeDeletionFlags
USER = "user"
COMMENT = "comment"
CONTENT = "content"


@dataclass(frozen=True, kw_only=True)
class DeletedRevision(ExpandedRevision):
    # the log entry which hid the revision parts, or True when unknown
    deleted: Literal[True] | RevisionDeletionInfo = True
    # whether this revision is the likely cause of the page's deletion,
    # only meaningful when the content is hidden
    islikelycause: bool = False

    # hidden parts, set by the subclasses
    redactions = frozenset()

    def to_api(self) -> dict[str, Any]:
        api_entry = super().to_api()
        if USER in self.redactions:
            api_entry.pop("user", None)
        if COMMENT in self.redactions:
            api_entry.pop("comment", None)
            api_entry.pop("parsedcomment", None)
        if CONTENT in self.redactions:
            api_entry["islikelycause"] = self.islikelycause
        api_entry["deleted"] = True if self.deleted is True else self.deleted.to_api()
        return api_entry


class UserDeletedRevision(DeletedRevision):
    redactions = frozenset({USER})


class CommentDeletedRevision(DeletedRevision):
    redactions = frozenset({COMMENT})


class TextDeletedRevision(DeletedRevision):
    redactions = frozenset({CONTENT})


class UserCommentDeletedRevision(UserDeletedRevision, CommentDeletedRevision):
    redactions = frozenset({USER, COMMENT})


class UserTextDeletedRevision(UserDeletedRevision, TextDeletedRevision):
    redactions = frozenset({USER, CONTENT})


class CommentTextDeletedRevision(CommentDeletedRevision, TextDeletedRevision):
    redactions = frozenset({COMMENT, CONTENT})


class UserCommentTextDeletedRevision(UserCommentDeletedRevision, UserTextDeletedRevision, CommentTextDeletedRevision):
    redactions = frozenset({USER, COMMENT, CONTENT})


_VARIANTS = {
    cls.redactions: cls
    for cls in (
        UserDeletedRevision,
        CommentDeletedRevision,
        TextDeletedRevision,
        UserCommentDeletedRevision,
        UserTextDeletedRevision,
        CommentTextDeletedRevision,
        UserCommentTextDeletedRevision,
    )
}


def hidden_dimensions(revision: ExpandedRevision) -> frozenset[str]:
    """
    Parts of the revision marked as hidden, either by the ``*hidden`` flags or
    by the ``visibility`` object.
    """
    visibility = revision.visibility
    hidden = set()
    if revision.userhidden or (visibility is not None and visibility.user):
        hidden.add(USER)
    if revision.commenthidden or (visibility is not None and visibility.comment):
        hidden.add(COMMENT)
    if revision.texthidden or (visibility is not None and visibility.text):
        hidden.add(CONTENT)
    return frozenset(hidden)


def _deletion_marker(revid: int, hidden: frozenset[str], deleted: Any) -> Literal[True] | RevisionDeletionInfo:
    if deleted is None or deleted is True:
        return True
    if not isinstance(deleted, RevisionDeletionInfo):
        raise TypeError(f"expected a revision deletion log entry or True, got {deleted!r}")

    if revid not in deleted.params.ids:
        logger.warning("Log entry {} does not list revision {}, ignoring it".format(deleted.logid, revid))
        return True
    flags = deleted.flags
    if flags is None:
        logger.debug("Log entry {} has unknown flags, cannot confirm deletion of revision {}".format(deleted.logid, revid))
        return True
    unconfirmed = sorted(part for part in hidden if not getattr(flags, part))
    if unconfirmed:
        logger.warning("Revision {} has hidden {} but log entry {} does not hide it (bitmask {})"
                       .format(revid, ", ".join(unconfirmed), deleted.logid, flags.bitmask))
        return True
    return deleted


def resolve_revision(
    revision: Revision,
    deleted: Literal[True] | RevisionDeletionInfo | None = None,
    *,
    islikelycause: bool = False,
) -> Revision:
    """
    Narrow a revision into the variant describing which of its parts are
    hidden.

    Missing and invalid revisions are returned as they are, as well as
    revisions without any hidden part. Values of the hidden fields are taken
    over from the input, the caller is responsible for having them removed;
    use the ``is_revision_*_hidden`` predicates to check the result.

    :param revision: the revision record
    :param deleted:
        the ``delete/revision`` log entry for the revision, e.g. found by
        :py:func:`find_deletion_info`. ``True`` or ``None`` means the entry
        is unknown. The entry is kept only if it lists the revision and its
        ``new`` flags hide every hidden part of the revision.
    :param islikelycause:
        whether the revision is the likely cause of a deletion, stored only
        for revisions with hidden content. A revision which is already
        resolved keeps its own value when ``False`` is passed.
    :returns: the resolved revision record
    :raises TypeError: when ``revision`` is not a revision record
    """
    match revision:
        case MissingRevision() | InvalidRevision():
            return revision
        case ExpandedRevision():
            pass
        case _:
            raise TypeError(f"not a revision record: {revision!r}")

    hidden = hidden_dimensions(revision)
    if not hidden:
        return revision

    if isinstance(revision, DeletedRevision):
        islikelycause = islikelycause or revision.islikelycause

    values = {f.name: getattr(revision, f.name) for f in fields(ExpandedRevision)}
    values["userhidden"] = USER in hidden
    values["commenthidden"] = COMMENT in hidden
    values["texthidden"] = CONTENT in hidden

    variant = _VARIANTS[hidden]
    return variant(
        **values,
        deleted=_deletion_marker(revision.revid, hidden, deleted),
        islikelycause=islikelycause and CONTENT in hidden,
    )


def _confirms(deleted: Literal[True] | RevisionDeletionInfo, part: str) -> bool:
    if deleted is True:
        return True
    flags = deleted.flags
    return flags is not None and getattr(flags, part)


def is_revision_user_hidden(revision: Revision) -> TypeGuard[UserDeletedRevision]:
    """
    Checks if a revision is a :py:class:`UserDeletedRevision` whose user is
    not present and, when the deleting log entry is known, is hidden by it.
    """
    match revision:
        case UserDeletedRevision(userhidden=True, user=None):
            return _confirms(revision.deleted, USER)
    return False


def is_revision_comment_hidden(revision: Revision) -> TypeGuard[CommentDeletedRevision]:
    """
    Checks if a revision is a :py:class:`CommentDeletedRevision` whose
    comment is not present and, when the deleting log entry is known, is
    hidden by it.
    """
    match revision:
        case CommentDeletedRevision(commenthidden=True, comment=None, parsedcomment=None):
            return _confirms(revision.deleted, COMMENT)
    return False


def is_revision_text_hidden(revision: Revision) -> TypeGuard[TextDeletedRevision]:
    """
    Checks if a revision is a :py:class:`TextDeletedRevision` whose content,
    when the deleting log entry is known, is hidden by it.
    """
    match revision:
        case TextDeletedRevision(texthidden=True):
            return _confirms(revision.deleted, CONTENT)
    return False


def deleted_dimensions(revision: Revision) -> frozenset[str]:
    """
    All parts of the revision confirmed as hidden by the predicates above.
    """
    confirmed = set()
    if is_revision_user_hidden(revision):
        confirmed.add(USER)
    if is_revision_comment_hidden(revision):
        confirmed.add(COMMENT)
    if is_revision_text_hidden(revision):
        confirmed.add(CONTENT)
    return frozenset(confirmed)


def find_deletion_info(revid: int, log_entries: Iterable[LogEntry]) -> Literal[True] | RevisionDeletionInfo:
    """
    Find the log entry of the last revision deletion action affecting the
    given revision.

    :param revid: the revision ID
    :param log_entries: log entries, other types than revision deletion are skipped
    :returns: the most recent matching :py:class:`RevisionDeletionInfo`, or
        ``True`` when there is none
    """
    candidates = [
        entry for entry in log_entries
        if isinstance(entry, RevisionDeletionInfo) and revid in entry.params.ids
    ]
    if not candidates:
        return True
    # timestamps are ISO 8601 strings, so they sort chronologically
    return max(candidates, key=lambda entry: (entry.timestamp, entry.logid))
