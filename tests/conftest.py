import pytest

from dispatch.models import (
    ExpandedRevision,
    PageIdentity,
    RevisionDeletionInfo,
    RevisionDeletionParams,
    decode_bitmask,
)


@pytest.fixture
def page() -> PageIdentity:
    return PageIdentity(pageid=42, ns=0, title="Main Page")


@pytest.fixture
def make_revision(page):
    """Factory for expanded revisions with sensible defaults."""
    def make_revision(**kwargs) -> ExpandedRevision:
        kwargs.setdefault("revid", 1000)
        kwargs.setdefault("parentid", 999)
        kwargs.setdefault("minor", False)
        kwargs.setdefault("user", "Alice")
        kwargs.setdefault("timestamp", "2023-03-01T12:00:00Z")
        kwargs.setdefault("size", 2048)
        kwargs.setdefault("comment", "copyedit")
        kwargs.setdefault("page", page)
        kwargs.setdefault("diffsize", 12)
        return ExpandedRevision(**kwargs)
    return make_revision


@pytest.fixture
def make_deletion_info():
    """Factory for revision deletion log entries."""
    def make_deletion_info(new: int | None, ids=(1000,), old: int | None = 0, logid=5, timestamp="2023-03-02T08:00:00Z") -> RevisionDeletionInfo:
        return RevisionDeletionInfo(
            logid=logid,
            params=RevisionDeletionParams(
                type="revision",
                ids=list(ids),
                old=decode_bitmask(old) if old is not None else None,
                new=decode_bitmask(new) if new is not None else None,
            ),
            comment="[[WP:RD1|RD1]]: Violations of copyright policy",
            user="Admin",
            timestamp=timestamp,
        )
    return make_deletion_info
