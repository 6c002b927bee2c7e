"""
Constant pool entries and the pool that owns them.
"""

from dataclasses import dataclass
from typing import ClassVar, Iterator, Optional, Union

from .classfile import ConstantPoolTag
from .errors import InvalidConstantReference


@dataclass(frozen=True)
class Utf8:
    """Modified UTF-8 text. Undecodable bytes are kept as surrogate escapes."""
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.UTF8
    width: ClassVar[int] = 1
    value: str

    @property
    def raw(self) -> bytes:
        """The bytes exactly as they appeared in the class file."""
        return self.value.encode("utf-8", "surrogateescape")


@dataclass(frozen=True)
class Integer:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.INTEGER
    width: ClassVar[int] = 1
    value: int


@dataclass(frozen=True)
class Float:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.FLOAT
    width: ClassVar[int] = 1
    value: float


@dataclass(frozen=True)
class Long:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.LONG
    width: ClassVar[int] = 2
    value: int


@dataclass(frozen=True)
class Double:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.DOUBLE
    width: ClassVar[int] = 2
    value: float


@dataclass(frozen=True)
class ClassRef:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.CLASS
    width: ClassVar[int] = 1
    name_index: int


@dataclass(frozen=True)
class StringRef:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.STRING
    width: ClassVar[int] = 1
    utf8_index: int


@dataclass(frozen=True)
class FieldRef:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.FIELDREF
    width: ClassVar[int] = 1
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class MethodRef:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.METHODREF
    width: ClassVar[int] = 1
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class InterfaceMethodRef:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.INTERFACE_METHODREF
    width: ClassVar[int] = 1
    class_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class NameAndType:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.NAME_AND_TYPE
    width: ClassVar[int] = 1
    name_index: int
    descriptor_index: int


@dataclass(frozen=True)
class MethodHandle:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.METHOD_HANDLE
    width: ClassVar[int] = 1
    kind: int
    reference_index: int


@dataclass(frozen=True)
class MethodType:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.METHOD_TYPE
    width: ClassVar[int] = 1
    descriptor_index: int


@dataclass(frozen=True)
class Dynamic:
    """Dynamically computed constant.

    ``bootstrap_method_attr_index`` indexes the BootstrapMethods attribute,
    not the constant pool.
    """
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.DYNAMIC
    width: ClassVar[int] = 1
    bootstrap_method_attr_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class InvokeDynamic:
    """Call site for invokedynamic.

    ``bootstrap_method_attr_index`` indexes the BootstrapMethods attribute,
    not the constant pool.
    """
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.INVOKE_DYNAMIC
    width: ClassVar[int] = 1
    bootstrap_method_attr_index: int
    name_and_type_index: int


@dataclass(frozen=True)
class Module:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.MODULE
    width: ClassVar[int] = 1
    name_index: int


@dataclass(frozen=True)
class Package:
    tag: ClassVar[ConstantPoolTag] = ConstantPoolTag.PACKAGE
    width: ClassVar[int] = 1
    name_index: int


ConstantPoolEntry = Union[
    Utf8, Integer, Float, Long, Double, ClassRef, StringRef,
    FieldRef, MethodRef, InterfaceMethodRef, NameAndType,
    MethodHandle, MethodType, Dynamic, InvokeDynamic, Module, Package,
]


class ConstantPool:
    """Fixed-size constant pool, the sole owner of its entries.

    Slots are 0-based internally; :meth:`get` and the typed lookups take the
    1-based indices used inside class files. The slot after a Long or Double
    stays empty and cannot be looked up.
    """

    def __init__(self, size: int):
        self.size = size
        self._slots: Optional[list[Optional[ConstantPoolEntry]]] = [None] * size

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        state = "released" if self.released else f"{self.count()} entries"
        return f"ConstantPool(size={self.size}, {state})"

    @property
    def released(self) -> bool:
        return self._slots is None

    def _live(self) -> list[Optional[ConstantPoolEntry]]:
        if self._slots is None:
            raise ValueError("constant pool has been released")
        return self._slots

    def store(self, slot_index: int, entry: ConstantPoolEntry):
        self._live()[slot_index] = entry

    def slot(self, slot_index: int) -> Optional[ConstantPoolEntry]:
        """Raw 0-based slot access; ``None`` for unfilled or padding slots."""
        return self._live()[slot_index]

    def count(self) -> int:
        """Number of entries currently held."""
        return sum(1 for entry in self._live() if entry is not None)

    def __iter__(self) -> Iterator[tuple[int, ConstantPoolEntry]]:
        """Yield ``(index, entry)`` pairs with 1-based indices, skipping padding."""
        for slot_index, entry in enumerate(self._live()):
            if entry is not None:
                yield slot_index + 1, entry

    def get(self, index: int, *kinds: type, slot_index: Optional[int] = None) -> ConstantPoolEntry:
        """Look up a 1-based index, optionally requiring one of ``kinds``.

        ``slot_index`` names the slot holding the reference and is only used
        for error reporting.
        """
        slots = self._live()
        if not 1 <= index <= len(slots):
            raise InvalidConstantReference(index, slot_index, f"outside pool of {len(slots)} slot(s)")
        entry = slots[index - 1]
        if entry is None:
            raise InvalidConstantReference(index, slot_index, "unusable slot")
        if kinds and not isinstance(entry, kinds):
            expected = " or ".join(k.tag.name for k in kinds)
            raise InvalidConstantReference(
                index, slot_index, f"expected {expected}, got {entry.tag.name}"
            )
        return entry

    def utf8(self, index: int, slot_index: Optional[int] = None) -> str:
        return self.get(index, Utf8, slot_index=slot_index).value

    def class_name(self, index: int, slot_index: Optional[int] = None) -> str:
        """Follow a Class entry to its Utf8 internal name."""
        entry = self.get(index, ClassRef, slot_index=slot_index)
        return self.utf8(entry.name_index, slot_index=index - 1)

    def release(self) -> int:
        """Drop every entry and the slot table; returns how many were dropped.

        Releasing an already released pool drops nothing.
        """
        if self._slots is None:
            return 0
        released = 0
        for slot_index, entry in enumerate(self._slots):
            if entry is not None:
                self._slots[slot_index] = None
                released += 1
        self._slots = None
        return released
