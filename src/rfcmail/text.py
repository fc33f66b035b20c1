from __future__ import annotations

from typing import Callable, Optional, Tuple, Union

_EMPTY = b""

BytesLike = Union[bytes, bytearray, memoryview]


class View:
    """
    A read-only window over an immutable ``bytes`` buffer.

    Parsers receive a View and hand back the View that remains after them.
    Advancing or splitting a View never copies the buffer. A ``lenient``
    View also accepts a bare LF wherever a line ends or folds, and the
    Views derived from it inherit the flag.
    """

    __slots__ = ("buffer", "start", "end", "lenient")

    def __init__(self, buffer: bytes, start: int = 0, end: Optional[int] = None, lenient: bool = False):
        self.buffer = buffer
        self.start = start
        self.end = len(buffer) if end is None else end
        self.lenient = lenient

    @classmethod
    def of(cls, data: Union["View", BytesLike]) -> "View":
        if isinstance(data, View):
            return data
        if isinstance(data, bytes):
            return cls(data)
        # mutable or foreign buffers are frozen once so that spans stay valid
        return cls(bytes(data))

    def __len__(self) -> int:
        return self.end - self.start

    def __bool__(self) -> bool:
        return self.end > self.start

    def __getitem__(self, index: int) -> int:
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("view index out of range")
        return self.buffer[self.start + index]

    def get(self, index: int) -> Optional[int]:
        if 0 <= index < len(self):
            return self.buffer[self.start + index]
        return None

    def startswith(self, literal: bytes) -> bool:
        return self.buffer.startswith(literal, self.start, self.end)

    def find(self, sub: bytes, offset: int = 0) -> int:
        idx = self.buffer.find(sub, self.start + offset, self.end)
        return -1 if idx == -1 else idx - self.start

    def count_while(self, predicate: Callable[[int], bool], offset: int = 0) -> int:
        buf = self.buffer
        pos = self.start + offset
        while pos < self.end and predicate(buf[pos]):
            pos += 1
        return pos - self.start - offset

    def advance(self, n: int) -> "View":
        return View(self.buffer, self.start + n, self.end, self.lenient)

    def take(self, n: int) -> "View":
        return View(self.buffer, self.start, self.start + n, self.lenient)

    def with_lenient(self, lenient: bool) -> "View":
        if lenient == self.lenient:
            return self
        return View(self.buffer, self.start, self.end, lenient)

    def text(self, n: Optional[int] = None) -> "Text":
        end = self.end if n is None else self.start + n
        return Text.from_span(self.buffer, self.start, end)

    def split(self, n: int) -> Tuple["View", "Text"]:
        return self.advance(n), self.text(n)

    def tobytes(self) -> bytes:
        if self.start == 0 and self.end == len(self.buffer):
            return self.buffer
        return self.buffer[self.start:self.end]

    def memory(self) -> memoryview:
        return memoryview(self.buffer)[self.start:self.end]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, View):
            return self.tobytes() == other.tobytes()
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self.tobytes() == bytes(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"View({self.tobytes()!r})"


class Text:
    """
    Text that is either a span of an input buffer or an owned string.

    Appending keeps the value borrowed whenever the appended span starts
    exactly where this one ends in the same buffer. Any other append
    materializes an owned string.
    """

    __slots__ = ("_buffer", "_start", "_end", "_owned")

    def __init__(self) -> None:
        self._buffer: bytes = _EMPTY
        self._start = 0
        self._end = 0
        self._owned: Optional[str] = None

    @classmethod
    def empty(cls) -> "Text":
        return cls()

    @classmethod
    def from_span(cls, buffer: bytes, start: int, end: int) -> "Text":
        t = cls()
        t._buffer = buffer
        t._start = start
        t._end = end
        return t

    @classmethod
    def owned(cls, value: str) -> "Text":
        t = cls()
        t._owned = value
        return t

    @property
    def is_borrowed(self) -> bool:
        return self._owned is None

    @property
    def span(self) -> Optional[Tuple[bytes, int, int]]:
        if self._owned is not None:
            return None
        return self._buffer, self._start, self._end

    def is_empty(self) -> bool:
        if self._owned is not None:
            return not self._owned
        return self._end == self._start

    def append(self, other: Union["Text", str]) -> None:
        if isinstance(other, str):
            other = Text.owned(other)
        if other.is_empty():
            return
        if self.is_empty():
            self._buffer = other._buffer
            self._start = other._start
            self._end = other._end
            self._owned = other._owned
            return
        if (
            self._owned is None
            and other._owned is None
            and self._buffer is other._buffer
            and self._end == other._start
        ):
            self._end = other._end
            return
        self._owned = self.to_str() + other.to_str()
        self._buffer = _EMPTY
        self._start = self._end = 0

    def __iadd__(self, other: Union["Text", str]) -> "Text":
        self.append(other)
        return self

    def __add__(self, other: Union["Text", str]) -> "Text":
        out = self.copy()
        out.append(other)
        return out

    def copy(self) -> "Text":
        if self._owned is not None:
            return Text.owned(self._owned)
        return Text.from_span(self._buffer, self._start, self._end)

    def to_str(self) -> str:
        if self._owned is not None:
            return self._owned
        return self._buffer[self._start:self._end].decode("utf-8", errors="replace")

    def as_bytes(self) -> Union[memoryview, bytes]:
        if self._owned is not None:
            return self._owned.encode("utf-8")
        return memoryview(self._buffer)[self._start:self._end]

    def lower(self) -> "Text":
        if self._owned is None:
            raw = self._buffer[self._start:self._end]
            if raw == raw.lower():
                return self
            return Text.owned(raw.lower().decode("utf-8", errors="replace"))
        lowered = self._owned.lower()
        return self if lowered == self._owned else Text.owned(lowered)

    def view(self) -> View:
        """A parser input over this text, borrowed when possible."""
        if self._owned is None:
            return View(self._buffer, self._start, self._end)
        return View(self._owned.encode("utf-8"))

    def __len__(self) -> int:
        if self._owned is not None:
            return len(self._owned)
        return self._end - self._start

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __str__(self) -> str:
        return self.to_str()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Text):
            return self.to_str() == other.to_str()
        if isinstance(other, str):
            return self.to_str() == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_str())

    def __repr__(self) -> str:
        kind = "borrowed" if self._owned is None else "owned"
        return f"Text({self.to_str()!r}, {kind})"
