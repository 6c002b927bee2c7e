"""
Errors raised while decoding a class file.
"""

from typing import Optional


class ClassFormatError(Exception):
    """Malformed or unsupported class file data."""
    pass


class TruncatedInput(ClassFormatError):
    """A read would run past the end of the buffer."""

    def __init__(self, offset: int, needed: int, available: int):
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(
            f"Truncated input at offset {offset}: need {needed} byte(s), {available} available"
        )


class UnknownConstantTag(ClassFormatError):
    """A constant pool entry has a tag byte outside the known set."""

    def __init__(self, tag: int, slot_index: int):
        self.tag = tag
        self.slot_index = slot_index
        super().__init__(f"Unknown constant pool tag {tag} at slot {slot_index}")


class InvalidConstantReference(ClassFormatError):
    """An index is out of range or names an entry of the wrong kind.

    ``index`` is the 1-based pool index that failed to resolve and
    ``slot_index`` is the 0-based slot of the entry holding the
    reference, or ``None`` when the reference came from the class header.
    """

    def __init__(self, index: int, slot_index: Optional[int] = None, reason: str = ""):
        self.index = index
        self.slot_index = slot_index
        self.reason = reason
        where = "class header" if slot_index is None else f"slot {slot_index}"
        msg = f"Invalid constant pool reference #{index} from {where}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class AllocationFailure(ClassFormatError):
    """Memory for the pool or an entry payload could not be allocated."""

    def __init__(self, what: str):
        self.what = what
        super().__init__(f"Allocation failed for {what}")


class ConstantPoolOverrun(ClassFormatError):
    """A two-slot constant starts in the last slot of the pool."""

    def __init__(self, slot_index: int):
        self.slot_index = slot_index
        super().__init__(f"Two-slot constant at slot {slot_index} overruns the constant pool")


class InvalidMagic(ClassFormatError):
    """The file does not start with 0xCAFEBABE (strict mode only)."""

    def __init__(self, magic: int):
        self.magic = magic
        super().__init__(f"Invalid class file magic: {hex(magic)}")
