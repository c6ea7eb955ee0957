"""
sgfedit exception hierarchy.

Provides a base exception class with user-facing messages and debug context,
plus specialized subclasses for the parser and the tree-edit engine.
"""

from typing import Any, Dict, List, Optional


class SgfEditError(Exception):
    """Base exception for sgfedit errors.

    Attributes:
        user_message: Safe, user-facing error message.
        context: Dictionary of debug information.
    """

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.user_message = user_message or message
        self.context = context or {}


class SgfParseError(SgfEditError):
    """SGF text could not be turned into a collection.

    Attributes:
        errors: One message per problem found. Syntax errors produce a single
            entry; tree-level problems (such as a missing SZ) produce one entry
            per offending game tree.
    """

    HEADER = "The following errors occurred while parsing:"

    def __init__(self, errors: List[str], *, context: Optional[Dict[str, Any]] = None):
        self.errors = list(errors)
        message = self.HEADER + "".join(f"\n-> {error}" for error in self.errors)
        super().__init__(message, user_message=message, context=context)


class PreconditionViolation(SgfEditError):
    """An editor operation was called in a state where it is not allowed.

    The operation is aborted without changing the editor state.
    """

    pass


class InvariantFailure(SgfEditError):
    """Internal bookkeeping was found inconsistent. Indicates a bug, not bad input."""

    pass
