"""
The :py:mod:`dispatch.error_response` module builds error responses in the
shape of the MediaWiki API's error formats (see `API:Errors and warnings`_).

Errors are collected in an :py:class:`ErrorResponseBuilder` while a request
is handled and rendered once at the end with :py:meth:`ErrorResponseBuilder.build`.
The supported values of the ``errorformat`` parameter are ``wikitext``,
``plaintext``, ``raw`` and ``bc``, plus ``text`` which renders the same
output as ``plaintext`` and ``wikitext``.

A builder is meant to be owned by a single request; it is not synchronized,
so concurrent requests must not share one instance.

.. _`API:Errors and warnings`: https://www.mediawiki.org/wiki/API:Errors_and_warnings
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Self

logger = logging.getLogger(__name__)

__all__ = ["ErrorMessage", "ErrorResponseBuilder", "UnsupportedErrorFormat", "ERROR_FORMATS", "DOCREF", "MODULE"]

DOCREF = "https://github.com/ChlodAlejandro/deputy-dispatch"
MODULE = "deputy-dispatch"

TEXT_FORMATS = frozenset({"text", "plaintext", "wikitext"})
ERROR_FORMATS = TEXT_FORMATS | {"raw", "bc"}


class UnsupportedErrorFormat(ValueError):
    """Raised when an unknown error format is requested.

    This is a programming error, it should be fixed in the client code.
    """

    def __init__(self, errorformat: Any):
        self.errorformat = errorformat
        self.message = f"{errorformat!r} (supported formats are: {', '.join(sorted(ERROR_FORMATS))})"
        super().__init__(self.message)

    def __str__(self):
        return self.message


@dataclass(frozen=True)
class ErrorMessage:
    # message key, used for localization on the client side
    key: str
    # English fallback text
    text: str
    # parameters of the localized message
    params: list[str] | None = None

    @classmethod
    def from_mapping(cls, message: Mapping[str, Any]) -> "ErrorMessage":
        params = message.get("params")
        return cls(
            key=message["key"],
            text=message["text"],
            params=list(params) if params is not None else None,
        )


@dataclass(frozen=True)
class _Error:
    code: str
    message: ErrorMessage
    data: dict[str, Any] | None = None


class ErrorResponseBuilder:
    """
    Accumulator of errors which renders them into a MediaWiki API-like error
    response. The mutating methods return the builder itself, so calls can be
    chained:

    .. code-block:: python

        response = ErrorResponseBuilder() \\
            .add("missingrevision", ErrorMessage("apierror-nosuchrevid", "There is no revision with ID 1.", ["1"])) \\
            .build("raw")
    """

    # catch-all builder with a single generic error; clone it before modifying
    generic: "ErrorResponseBuilder"

    def __init__(self):
        self._errors: list[_Error] = []

    def __len__(self) -> int:
        return len(self._errors)

    def __repr__(self) -> str:
        return f"<ErrorResponseBuilder {[e.code for e in self._errors]}>"

    @property
    def empty(self) -> bool:
        """``True`` if this builder has no errors."""
        return not self._errors

    def clone(self) -> "ErrorResponseBuilder":
        """
        :returns: a new builder with the same errors as this one. The error
            entries are shared, but errors added to or cleared from either
            builder afterwards do not affect the other one.
        """
        builder = ErrorResponseBuilder()
        builder._errors.extend(self._errors)
        return builder

    def add(self, code: str, message: ErrorMessage | Mapping[str, Any], data: Mapping[str, Any] | None = None) -> Self:
        """
        Add an error to the response.

        :param code: the error code
        :param message:
            the error message, either an :py:class:`ErrorMessage` or a mapping
            with the ``key``, ``text`` and optional ``params`` keys
        :param data: additional data merged into the rendered error
        :returns: this builder
        """
        if not isinstance(message, ErrorMessage):
            message = ErrorMessage.from_mapping(message)
        self._errors.append(_Error(code, message, dict(data) if data is not None else None))
        logger.debug(f"Added error '{code}': {message.text}")
        return self

    def with_(self, builder: "ErrorResponseBuilder") -> Self:
        """
        Append all errors from ``builder`` to this builder. ``builder`` itself
        is not modified.

        :returns: this builder
        """
        self._errors.extend(builder._errors)
        return self

    def clear(self) -> Self:
        """
        Drop all stored errors.

        :returns: this builder
        """
        self._errors = []
        return self

    def build(self, errorformat: str = "text") -> dict[str, Any] | None:
        """
        Render the accumulated errors.

        The ``*text`` and ``raw`` formats produce ``{"errors": [...], "docref": DOCREF}``
        with one object per error. The ``bc`` format produces a single
        ``{"code": ..., "info": ...}`` object for the first error only, without
        ``docref``.

        The builder is not modified and can be used further.

        :param errorformat: one of :py:data:`ERROR_FORMATS`
        :returns: the error response, or ``None`` when there are no errors
            (this does not mean the request succeeded, only that nothing was
            reported yet)
        :raises UnsupportedErrorFormat: for an unknown ``errorformat``
        """
        if errorformat not in ERROR_FORMATS:
            raise UnsupportedErrorFormat(errorformat)
        if self.empty:
            return None

        if errorformat == "bc":
            first = self._errors[0]
            return {
                "code": first.code,
                "info": first.message.text,
                **(first.data or {}),
            }

        errors = []
        for error in self._errors:
            rendered: dict[str, Any] = {"code": error.code}
            if errorformat in TEXT_FORMATS:
                rendered["text"] = error.message.text
            else:
                rendered["key"] = error.message.key
                if error.message.params is not None:
                    rendered["params"] = list(error.message.params)
            rendered["module"] = MODULE
            rendered.update(error.data or {})
            errors.append(rendered)

        return {"errors": errors, "docref": DOCREF}


ErrorResponseBuilder.generic = ErrorResponseBuilder().add(
    "generic-error",
    ErrorMessage(key="apierror-generic", text="A generic error."),
)
