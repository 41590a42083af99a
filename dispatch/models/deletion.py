"""
Decoding of the RevisionDelete bitfields.

MediaWiki stores the visibility of a revision (or a log entry) as a small
bitfield, see `Manual:RevisionDelete`_. The API exposes the same bitfield in
the parameters of ``delete/revision`` log entries together with the decoded
booleans:

.. code-block:: json

    {"bitmask": 5, "content": true, "comment": false, "user": true, "restricted": false}

.. _`Manual:RevisionDelete`: https://www.mediawiki.org/wiki/Manual:RevisionDelete
"""

from dataclasses import dataclass
from typing import Any

import dispatch.mw_constants as mwconst

__all__ = ["ChangeDeletionFlags", "decode_bitmask", "encode_flags"]


@dataclass(frozen=True)
class ChangeDeletionFlags:
    # the raw bitmask, unknown high bits included
    bitmask: int
    # revision content (text) is hidden
    content: bool
    # edit summary is hidden
    comment: bool
    # name of the editing user is hidden
    user: bool
    # the change is suppressed (hidden from administrators too)
    restricted: bool

    @classmethod
    def from_api(cls, value: Any) -> "ChangeDeletionFlags | None":
        """
        Create flags from the value found in the ``old``/``new`` parameters of
        a revision deletion log entry.

        The booleans sent alongside the bitmask are not trusted, they are
        always derived from the bitmask again.

        :param value: an ``int`` bitmask, a dict with the ``bitmask`` key, or ``None``
        :returns: an instance of :py:class:`ChangeDeletionFlags`, or ``None``
            when the flags are unknown
        """
        if value is None:
            return None
        if isinstance(value, bool):
            raise TypeError(f"expected a bitmask, got {value!r}")
        if isinstance(value, int):
            return decode_bitmask(value)
        if isinstance(value, dict) and "bitmask" in value:
            return decode_bitmask(int(value["bitmask"]))
        raise ValueError(f"cannot decode deletion flags from {value!r}")

    def to_api(self) -> dict[str, Any]:
        return {
            "bitmask": self.bitmask,
            "content": self.content,
            "comment": self.comment,
            "user": self.user,
            "restricted": self.restricted,
        }


def decode_bitmask(bitmask: int) -> ChangeDeletionFlags:
    """
    Decode a RevisionDelete bitmask. Bits above :py:data:`DELETED_RESTRICTED
    <dispatch.mw_constants.DELETED_RESTRICTED>` are preserved in
    :py:attr:`ChangeDeletionFlags.bitmask` but do not affect any flag.
    """
    return ChangeDeletionFlags(
        bitmask=bitmask,
        content=bool(bitmask & mwconst.DELETED_TEXT),
        comment=bool(bitmask & mwconst.DELETED_COMMENT),
        user=bool(bitmask & mwconst.DELETED_USER),
        restricted=bool(bitmask & mwconst.DELETED_RESTRICTED),
    )


def encode_flags(flags: ChangeDeletionFlags) -> int:
    """
    Inverse of :py:func:`decode_bitmask` for the four named bits. The stored
    :py:attr:`ChangeDeletionFlags.bitmask` is not consulted.
    """
    bitmask = 0
    if flags.content:
        bitmask |= mwconst.DELETED_TEXT
    if flags.comment:
        bitmask |= mwconst.DELETED_COMMENT
    if flags.user:
        bitmask |= mwconst.DELETED_USER
    if flags.restricted:
        bitmask |= mwconst.DELETED_RESTRICTED
    return bitmask
