"""
Java class file reader: decodes the constant pool and resolves the
name of the class a file declares.

Decoding is a pure function of the input buffer. Each call builds its own
ConstantPool, so independent buffers can be decoded from many threads at once.
"""

import logging
import zipfile
from pathlib import Path
from typing import Callable, Optional

from .classfile import MAGIC, AccessFlags, ConstantPoolTag
from .constants import (
    ClassRef,
    ConstantPool,
    ConstantPoolEntry,
    Double,
    Dynamic,
    FieldRef,
    Float,
    Integer,
    InterfaceMethodRef,
    InvokeDynamic,
    Long,
    MethodHandle,
    MethodRef,
    MethodType,
    Module,
    NameAndType,
    Package,
    StringRef,
    Utf8,
)
from .cursor import ByteCursor
from .errors import AllocationFailure, ConstantPoolOverrun, InvalidMagic, UnknownConstantTag


_log = logging.getLogger(__name__)


def _read_utf8(cursor: ByteCursor) -> Utf8:
    length = cursor.read_u2()
    return Utf8(cursor.read_bytes(length).decode("utf-8", "surrogateescape"))


def _read_integer(cursor: ByteCursor) -> Integer:
    return Integer(cursor.read_i4())


def _read_float(cursor: ByteCursor) -> Float:
    return Float(cursor.read_f4())


def _read_long(cursor: ByteCursor) -> Long:
    return Long(cursor.read_i8())


def _read_double(cursor: ByteCursor) -> Double:
    return Double(cursor.read_f8())


def _read_class(cursor: ByteCursor) -> ClassRef:
    return ClassRef(cursor.read_u2())


def _read_string(cursor: ByteCursor) -> StringRef:
    return StringRef(cursor.read_u2())


def _read_fieldref(cursor: ByteCursor) -> FieldRef:
    class_idx = cursor.read_u2()
    nat_idx = cursor.read_u2()
    return FieldRef(class_idx, nat_idx)


def _read_methodref(cursor: ByteCursor) -> MethodRef:
    class_idx = cursor.read_u2()
    nat_idx = cursor.read_u2()
    return MethodRef(class_idx, nat_idx)


def _read_interface_methodref(cursor: ByteCursor) -> InterfaceMethodRef:
    class_idx = cursor.read_u2()
    nat_idx = cursor.read_u2()
    return InterfaceMethodRef(class_idx, nat_idx)


def _read_name_and_type(cursor: ByteCursor) -> NameAndType:
    name_idx = cursor.read_u2()
    desc_idx = cursor.read_u2()
    return NameAndType(name_idx, desc_idx)


def _read_method_handle(cursor: ByteCursor) -> MethodHandle:
    kind = cursor.read_u1()
    ref_idx = cursor.read_u2()
    return MethodHandle(kind, ref_idx)


def _read_method_type(cursor: ByteCursor) -> MethodType:
    return MethodType(cursor.read_u2())


def _read_dynamic(cursor: ByteCursor) -> Dynamic:
    bootstrap_idx = cursor.read_u2()
    nat_idx = cursor.read_u2()
    return Dynamic(bootstrap_idx, nat_idx)


def _read_invoke_dynamic(cursor: ByteCursor) -> InvokeDynamic:
    bootstrap_idx = cursor.read_u2()
    nat_idx = cursor.read_u2()
    return InvokeDynamic(bootstrap_idx, nat_idx)


def _read_module(cursor: ByteCursor) -> Module:
    return Module(cursor.read_u2())


def _read_package(cursor: ByteCursor) -> Package:
    return Package(cursor.read_u2())


ENTRY_READERS: dict[ConstantPoolTag, Callable[[ByteCursor], ConstantPoolEntry]] = {
    ConstantPoolTag.UTF8: _read_utf8,
    ConstantPoolTag.INTEGER: _read_integer,
    ConstantPoolTag.FLOAT: _read_float,
    ConstantPoolTag.LONG: _read_long,
    ConstantPoolTag.DOUBLE: _read_double,
    ConstantPoolTag.CLASS: _read_class,
    ConstantPoolTag.STRING: _read_string,
    ConstantPoolTag.FIELDREF: _read_fieldref,
    ConstantPoolTag.METHODREF: _read_methodref,
    ConstantPoolTag.INTERFACE_METHODREF: _read_interface_methodref,
    ConstantPoolTag.NAME_AND_TYPE: _read_name_and_type,
    ConstantPoolTag.METHOD_HANDLE: _read_method_handle,
    ConstantPoolTag.METHOD_TYPE: _read_method_type,
    ConstantPoolTag.DYNAMIC: _read_dynamic,
    ConstantPoolTag.INVOKE_DYNAMIC: _read_invoke_dynamic,
    ConstantPoolTag.MODULE: _read_module,
    ConstantPoolTag.PACKAGE: _read_package,
}


def decode_entry(cursor: ByteCursor, pool: ConstantPool, slot_index: int,
                 log: logging.Logger = _log) -> int:
    """Decode one tagged entry into ``pool`` at 0-based ``slot_index``.

    Returns the number of slots the entry occupies (2 for Long and Double).
    """
    tag_byte = cursor.read_u1()
    try:
        tag = ConstantPoolTag(tag_byte)
    except ValueError:
        raise UnknownConstantTag(tag_byte, slot_index) from None

    log.debug("slot %d: tag %s at offset %d", slot_index, tag.name, cursor.pos - 1)
    try:
        entry = ENTRY_READERS[tag](cursor)
    except MemoryError as e:
        raise AllocationFailure(f"{tag.name} entry at slot {slot_index}") from e

    if slot_index + entry.width > len(pool):
        raise ConstantPoolOverrun(slot_index)
    pool.store(slot_index, entry)
    return entry.width


def assemble_pool(cursor: ByteCursor, declared_count: int,
                  log: logging.Logger = _log) -> ConstantPool:
    """Decode ``declared_count - 1`` slots of constant pool from ``cursor``.

    On failure every entry decoded so far is released before the error
    propagates; a partially filled pool is never returned.
    """
    try:
        pool = ConstantPool(max(declared_count - 1, 0))
    except MemoryError as e:
        raise AllocationFailure(f"constant pool of {declared_count} slot(s)") from e

    slot_index = 0
    try:
        while slot_index < len(pool):
            slot_index += decode_entry(cursor, pool, slot_index, log)
    except BaseException:
        released = pool.release()
        log.debug("released %d entries after failure at slot %d", released, slot_index)
        raise

    log.debug("constant pool assembled: %d slot(s)", len(pool))
    return pool


def resolve_class_name(this_class_index: int, pool: ConstantPool) -> str:
    """Follow this_class -> Class -> Utf8 and return the internal class name."""
    return pool.class_name(this_class_index)


class ClassFile:
    """A decoded class: its name and the constant pool it exclusively owns.

    ``close()`` (or leaving a ``with`` block) releases the pool; the name and
    header fields stay readable afterwards, the pool does not.
    """

    def __init__(self, name: str, constant_pool: ConstantPool, *,
                 magic: int = MAGIC, version: tuple[int, int] = (0, 0),
                 access_flags: int = 0):
        self.name = name
        self.magic = magic
        self.version = version
        self.access_flags = AccessFlags(access_flags)
        self._constant_pool: Optional[ConstantPool] = constant_pool

    @property
    def constant_pool(self) -> ConstantPool:
        if self._constant_pool is None:
            raise ValueError(f"class file {self.name} has been closed")
        return self._constant_pool

    @property
    def signature(self) -> str:
        """Class signature used as a registry key, e.g. ``Lcom/example/Foo;``."""
        return f"L{self.name};"

    @property
    def closed(self) -> bool:
        return self._constant_pool is None

    def close(self) -> int:
        """Release the constant pool. Returns the number of entries released."""
        pool, self._constant_pool = self._constant_pool, None
        if pool is None:
            return 0
        return pool.release()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self) -> str:
        major, minor = self.version
        return f"ClassFile({self.name!r}, version={major}.{minor}, closed={self.closed})"


def decode(data: bytes, *, strict: bool = False,
           log: Optional[logging.Logger] = None) -> ClassFile:
    """Decode a class file held in memory.

    With ``strict`` a magic other than 0xCAFEBABE is rejected; otherwise the
    header is informational. ``log`` receives debug events for this call.
    """
    log = log or _log
    cursor = ByteCursor(data)

    magic = cursor.read_u4()
    if magic != MAGIC:
        if strict:
            raise InvalidMagic(magic)
        log.debug("unexpected magic %s, continuing", hex(magic))

    minor = cursor.read_u2()
    major = cursor.read_u2()
    count = cursor.read_u2()
    log.debug("version %d.%d, constant pool count %d", major, minor, count)

    pool = assemble_pool(cursor, count, log)
    try:
        access_flags = cursor.read_u2()
        this_class_idx = cursor.read_u2()
        name = resolve_class_name(this_class_idx, pool)
    except BaseException:
        pool.release()
        raise

    log.debug("resolved this_class #%d -> %s", this_class_idx, name)
    return ClassFile(
        name,
        pool,
        magic=magic,
        version=(major, minor),
        access_flags=access_flags,
    )


def read_class_file(path: str | Path, **options) -> ClassFile:
    """Read and decode a single class file."""
    data = Path(path).read_bytes()
    return decode(data, **options)


class ClassPath:
    """Locates class files by internal name in directories and jar/zip archives."""

    def __init__(self):
        self.entries: list[Path | zipfile.ZipFile] = []
        self._zip_files: list[zipfile.ZipFile] = []

    def add_path(self, path: str | Path):
        """Add a path to the classpath (directory or jar/zip)."""
        path = Path(path)
        if path.suffix in (".jar", ".zip"):
            try:
                zf = zipfile.ZipFile(path, "r")
            except zipfile.BadZipFile as e:
                raise ValueError(f"Invalid classpath entry: {path}") from e
            self._zip_files.append(zf)
            self.entries.append(zf)
        elif path.is_dir():
            self.entries.append(path)
        else:
            raise ValueError(f"Invalid classpath entry: {path}")

    def find_bytes(self, class_name: str) -> Optional[bytes]:
        """Raw bytes of a class by internal name (e.g. 'java/lang/String')."""
        class_file = class_name + ".class"

        for entry in self.entries:
            if isinstance(entry, zipfile.ZipFile):
                try:
                    return entry.read(class_file)
                except KeyError:
                    continue
            path = entry / class_file
            if path.is_file():
                return path.read_bytes()

        return None

    def find_class(self, class_name: str, **options) -> Optional[ClassFile]:
        """Find and decode a class by internal name. The caller owns the result."""
        data = self.find_bytes(class_name)
        if data is None:
            return None
        return decode(data, **options)

    def close(self):
        """Close all zip files."""
        for zf in self._zip_files:
            zf.close()
        self._zip_files.clear()
        self.entries.clear()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
