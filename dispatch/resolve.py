"""
Resolution of revision deletions for revisions that were already fetched from
the wiki, e.g. by ``prop=revisions`` and ``list=logevents`` queries.

The input is a JSON document of the form

.. code-block:: json

    {
        "revisions": [{"revid": 1, "page": {...}, "diffsize": 10, ...}, ...],
        "logevents": [{"logid": 5, "params": {"type": "revision", ...}, ...}, ...]
    }

and the output contains the resolved revisions plus an error response for the
revisions which could not be resolved.
"""

import argparse
import json
import logging
import sys
from typing import Any, Self

import dispatch.config
from dispatch.config import ConfigurableObject
from dispatch.error_response import ERROR_FORMATS, ErrorMessage, ErrorResponseBuilder, UnsupportedErrorFormat
from dispatch.models import (
    DeletedRevision,
    InvalidRevision,
    LogEntry,
    MissingRevision,
    Revision,
    find_deletion_info,
    log_entry_from_api,
    resolve_revision,
    revision_from_api,
)
from dispatch.utils import dumps

logger = logging.getLogger(__name__)

__all__ = ["RevisionsResolver"]


class RevisionsResolver(ConfigurableObject):
    """
    :param errorformat: format of the error response, see :py:data:`ERROR_FORMATS`
    :param likely_causes: IDs of revisions which are the likely cause of a deletion
    :param input_path: path to the input document, ``"-"`` for stdin
    :param indent: indentation of the JSON output
    :raises UnsupportedErrorFormat: for an unknown ``errorformat``
    """

    def __init__(self, errorformat: str = "text", likely_causes: set[int] | None = None,
                 input_path: str = "-", indent: int | None = None):
        if errorformat not in ERROR_FORMATS:
            raise UnsupportedErrorFormat(errorformat)
        self.errorformat = errorformat
        self.likely_causes = likely_causes or set()
        self.input_path = input_path
        self.indent = indent

    @classmethod
    def set_argparser(cls, argparser: argparse.ArgumentParser) -> None:
        group = argparser.add_argument_group(title="Resolver parameters")
        group.add_argument("--input", dest="input_path", metavar="PATH", default="-",
                type=dispatch.config.argtype_existing_file,
                help="path to the JSON document with revisions and log events, '-' for stdin (default: %(default)s)")
        group.add_argument("--errorformat", choices=sorted(ERROR_FORMATS), default="text",
                help="format of the error response (default: %(default)s)")
        group.add_argument("--likely-cause", dest="likely_causes", metavar="REVID", type=int, nargs="+", default=[],
                help="IDs of revisions which are the likely cause of a deletion")
        group.add_argument("--indent", type=int, default=None,
                help="indentation of the JSON output (default: compact)")

    @classmethod
    def from_argparser(cls, args: argparse.Namespace) -> Self:
        return cls(
            errorformat=args.errorformat,
            likely_causes=set(args.likely_causes),
            input_path=args.input_path,
            indent=args.indent,
        )

    def load(self) -> dict[str, Any]:
        if self.input_path == "-":
            return json.load(sys.stdin)
        with open(self.input_path) as f:
            return json.load(f)

    def resolve(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Resolve all revisions in ``data``.

        :param data: the input document
        :returns:
            ``{"revisions": [...]}`` with the resolved records. If some
            revisions could not be resolved or some log events could not be
            read, the error response is merged in (under the ``error`` key for
            the ``bc`` format). Malformed log events are skipped.
        """
        errors = ErrorResponseBuilder()
        log_entries: list[LogEntry] = []
        for entry in data.get("logevents", []):
            try:
                log_entries.append(log_entry_from_api(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"Malformed log event {entry.get('logid')}: {e}")
                errors.add(
                    "badlogevent",
                    ErrorMessage("apierror-badlogevent", f"Malformed log event data: {e}."),
                    {"logid": entry.get("logid")},
                )

        revisions: list[Revision] = []
        for entry in data.get("revisions", []):
            try:
                revision = revision_from_api(entry)
            except (KeyError, ValueError) as e:
                logger.error(f"Malformed revision {entry.get('revid')}: {e}")
                errors.add(
                    "badrevision",
                    ErrorMessage("apierror-badrevision", f"Malformed revision data: {e}."),
                    {"revid": entry.get("revid")},
                )
                continue

            match revision:
                case MissingRevision(revid=revid):
                    errors.add(
                        "missingrevision",
                        ErrorMessage("apierror-nosuchrevid", f"There is no revision with ID {revid}.", [str(revid)]),
                        {"revid": revid},
                    )
                case InvalidRevision(revid=revid):
                    errors.add(
                        "invalidrevision",
                        ErrorMessage("apierror-badrevids", f"Invalid revision ID {revid}.", [str(revid)]),
                        {"revid": revid},
                    )
                case _:
                    deleted = find_deletion_info(revision.revid, log_entries)
                    revision = resolve_revision(revision, deleted, islikelycause=revision.revid in self.likely_causes)
            revisions.append(revision)

        hidden = sum(1 for r in revisions if isinstance(r, DeletedRevision))
        logger.info(f"Resolved {len(revisions)} revisions, {hidden} of them with hidden parts")

        result: dict[str, Any] = {"revisions": revisions}
        response = errors.build(self.errorformat)
        if response is not None:
            if self.errorformat == "bc":
                result["error"] = response
            else:
                result.update(response)
        return result

    def run(self) -> None:
        result = self.resolve(self.load())
        print(dumps(result, indent=self.indent))
