"""
Scope-stack aggregation of tokens into group tokens.
"""

import logging
from typing import List, Optional

from .models import GroupAccumulator, Token, TokenKind

logger = logging.getLogger(__name__)


class BBoxAggregator:
    """
    Stack of open groups and tagged regions.

    Leaf tokens are added to the innermost open accumulator.  Closing an
    accumulator concatenates its children's labels, unions their boxes,
    and hands the resulting group token to the next-outer accumulator,
    or to the flat output when nothing encloses it.  Empty accumulators
    produce nothing.
    """

    def __init__(self):
        self._stack: List[GroupAccumulator] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def top(self) -> Optional[GroupAccumulator]:
        return self._stack[-1] if self._stack else None

    def push(self, kind: str) -> None:
        self._stack.append(GroupAccumulator(kind=kind))

    def add(self, token: Token) -> bool:
        """Add *token* to the innermost accumulator.  False if none is open."""
        if not self._stack:
            return False
        self._stack[-1].children.append(token)
        return True

    def pop(self) -> Optional[Token]:
        """
        Close the innermost accumulator and return its group token.

        Returns ``None`` when the stack is empty or the accumulator
        collected no children.
        """
        if not self._stack:
            return None
        acc = self._stack.pop()
        if acc.is_empty:
            logger.debug("Discarding empty <%s> scope", acc.kind)
            return None
        return Token(
            label=acc.text,
            bbox=acc.bbox(),
            kind=TokenKind.GROUP,
            scope=acc.kind,
        )

    def close(self, output: List[Token]) -> Optional[Token]:
        """
        Close the innermost accumulator and route its group token to the
        enclosing accumulator, or append it to *output*.
        """
        token = self.pop()
        if token is not None and not self.add(token):
            output.append(token)
        return token

    def close_all(self, output: List[Token]) -> int:
        """Close every open accumulator, innermost first.  Returns how many."""
        closed = 0
        while self._stack:
            self.close(output)
            closed += 1
        return closed
