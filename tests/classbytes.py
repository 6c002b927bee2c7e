"""
Builds class file bytes for tests.

Unlike a real class writer this keeps entries in insertion order, never
deduplicates, and will happily emit dangling indices or unknown tags.
"""

import struct

from pyjdecode.classfile import MAGIC, WIDE_TAGS, ClassFileVersion, ConstantPoolTag


_FORMATS = {
    ConstantPoolTag.INTEGER: ">i",
    ConstantPoolTag.FLOAT: ">f",
    ConstantPoolTag.LONG: ">q",
    ConstantPoolTag.DOUBLE: ">d",
    ConstantPoolTag.CLASS: ">H",
    ConstantPoolTag.STRING: ">H",
    ConstantPoolTag.FIELDREF: ">HH",
    ConstantPoolTag.METHODREF: ">HH",
    ConstantPoolTag.INTERFACE_METHODREF: ">HH",
    ConstantPoolTag.NAME_AND_TYPE: ">HH",
    ConstantPoolTag.METHOD_HANDLE: ">BH",
    ConstantPoolTag.METHOD_TYPE: ">H",
    ConstantPoolTag.DYNAMIC: ">HH",
    ConstantPoolTag.INVOKE_DYNAMIC: ">HH",
    ConstantPoolTag.MODULE: ">H",
    ConstantPoolTag.PACKAGE: ">H",
}


class PoolBuilder:
    """Constant pool under construction; ``add_*`` return 1-based indices."""

    def __init__(self):
        self._entries: list[tuple] = [None]  # 1-indexed

    @property
    def count(self) -> int:
        """The constant_pool_count field: number of slots plus one."""
        return len(self._entries)

    def add_raw(self, tag: int, *values) -> int:
        idx = len(self._entries)
        self._entries.append((tag, values))
        # Long and Double take two slots
        if tag in WIDE_TAGS:
            self._entries.append(None)
        return idx

    def add_utf8(self, value: str | bytes) -> int:
        return self.add_raw(ConstantPoolTag.UTF8, value)

    def add_integer(self, value: int) -> int:
        return self.add_raw(ConstantPoolTag.INTEGER, value)

    def add_float(self, value: float) -> int:
        return self.add_raw(ConstantPoolTag.FLOAT, value)

    def add_long(self, value: int) -> int:
        return self.add_raw(ConstantPoolTag.LONG, value)

    def add_double(self, value: float) -> int:
        return self.add_raw(ConstantPoolTag.DOUBLE, value)

    def add_class(self, internal_name: str) -> int:
        name_idx = self.add_utf8(internal_name)
        return self.add_raw(ConstantPoolTag.CLASS, name_idx)

    def add_string(self, value: str) -> int:
        utf8_idx = self.add_utf8(value)
        return self.add_raw(ConstantPoolTag.STRING, utf8_idx)

    def add_name_and_type(self, name: str, descriptor: str) -> int:
        name_idx = self.add_utf8(name)
        desc_idx = self.add_utf8(descriptor)
        return self.add_raw(ConstantPoolTag.NAME_AND_TYPE, name_idx, desc_idx)

    def add_methodref(self, class_name: str, method_name: str, descriptor: str) -> int:
        class_idx = self.add_class(class_name)
        nat_idx = self.add_name_and_type(method_name, descriptor)
        return self.add_raw(ConstantPoolTag.METHODREF, class_idx, nat_idx)

    def add_fieldref(self, class_name: str, field_name: str, descriptor: str) -> int:
        class_idx = self.add_class(class_name)
        nat_idx = self.add_name_and_type(field_name, descriptor)
        return self.add_raw(ConstantPoolTag.FIELDREF, class_idx, nat_idx)

    def write(self, out: bytearray):
        out.extend(struct.pack(">H", self.count))
        for entry in self._entries[1:]:
            if entry is None:
                continue
            tag, values = entry
            out.append(tag)
            if tag == ConstantPoolTag.UTF8:
                data = values[0]
                if isinstance(data, str):
                    data = data.encode("utf-8")
                out.extend(struct.pack(">H", len(data)))
                out.extend(data)
            elif tag in _FORMATS:
                out.extend(struct.pack(_FORMATS[tag], *values))
            else:
                for value in values:
                    out.extend(value)


def build_class(pool: PoolBuilder, this_class: int, *, access_flags: int = 0x0021,
                magic: int = MAGIC, version: tuple[int, int] = ClassFileVersion.JAVA_8,
                tail: bytes = b"") -> bytes:
    """Header, pool, access flags and this_class, followed by ``tail``."""
    major, minor = version
    out = bytearray(struct.pack(">IHH", magic, minor, major))
    pool.write(out)
    out.extend(struct.pack(">HH", access_flags, this_class))
    out.extend(tail)
    return bytes(out)


def simple_class(internal_name: str, **kwargs) -> bytes:
    """A class whose pool is just Utf8 name followed by Class."""
    pool = PoolBuilder()
    this_class = pool.add_class(internal_name)
    return build_class(pool, this_class, **kwargs)


# magic, minor 0, major 52, count 3, #1 Utf8 "Foo", #2 Class #1, flags 0x21, this_class #2
MINIMAL_CLASS = bytes.fromhex(
    "cafebabe" "0000" "0034" "0003"
    "01" "0003" "466f6f"
    "07" "0001"
    "0021" "0002"
)
