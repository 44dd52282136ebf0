class HeapError(Exception):
    """Base class for errors raised by the pqueue package."""


class EmptyCollection(HeapError, IndexError):
    pass


class InvalidHandle(HeapError, ValueError):
    """The item is not a current occupant of the heap it was passed to."""


class HeapInvariantError(HeapError):
    pass
