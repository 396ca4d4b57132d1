"""
Token stream consumed by the parser.

The stream is a work queue over the raw tokens that supports splicing a
synthesized token back at the front. Short-option unbundling uses it to turn
"-abc" into "-a" followed by a pending "-bc" without touching the caller's list.

Every token remembers the 1-based position of the raw token it came from, so
diagnostics can say “at third position” even for synthesized tokens.
"""
from collections import deque


class TokenStream:
    """
    Front-consuming queue of (position, token) pairs.

    `position` reports where the most recently taken token came from
    (0 before anything was taken).
    """

    __slots__ = ("_pending", "_position")

    def __init__(self, tokens=(), /):
        self._pending = deque()
        self._position = 0
        for position, token in enumerate(tokens, 1):
            if not isinstance(token, str):
                raise TypeError(f"tokens must be strings ({type(token).__name__} is given)")
            self._pending.append((position, token))

    @property
    def position(self):
        return self._position

    def take(self):
        """Remove and return the next token; IndexError when exhausted."""
        try:
            self._position, token = self._pending.popleft()
        except IndexError:
            raise IndexError("take from an exhausted token stream") from None
        return token

    def peek(self):
        """Return the next token without consuming it, or None."""
        return self._pending[0][1] if self._pending else None

    def splice(self, token, /):
        """Put a synthesized token in front, attributed to the current position."""
        if not isinstance(token, str):
            raise TypeError("splice() argument must be a string")
        self._pending.appendleft((self._position, token))

    def __len__(self):
        return len(self._pending)

    def __bool__(self):
        return bool(self._pending)

    def __iter__(self):
        return (token for _, token in self._pending)

    def __repr__(self):
        return f"{type(self).__name__}({list(self)!r})"


__all__ = ("TokenStream",)
