"""
Human-readable descriptions of constant pool entries, in the style of javap.
"""

from .classfile import MethodHandleKind
from .constants import (
    ClassRef,
    ConstantPool,
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
from .errors import InvalidConstantReference


_KIND_NAMES = {
    FieldRef: "Fieldref",
    MethodRef: "Methodref",
    InterfaceMethodRef: "InterfaceMethodref",
}


def printable(text: str) -> str:
    """Text safe to print: bytes that are not valid UTF-8 become \\x escapes."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def _invalid(index: int) -> str:
    return f"<invalid #{index}>"


def _utf8(pool: ConstantPool, index: int) -> str:
    try:
        return printable(pool.utf8(index))
    except InvalidConstantReference:
        return _invalid(index)


def _class_name(pool: ConstantPool, index: int) -> str:
    try:
        return printable(pool.class_name(index))
    except InvalidConstantReference:
        return _invalid(index)


def _name_and_type(pool: ConstantPool, index: int) -> str:
    try:
        nat = pool.get(index, NameAndType)
    except InvalidConstantReference:
        return _invalid(index)
    return f"{_utf8(pool, nat.name_index)}:{_utf8(pool, nat.descriptor_index)}"


def _member(pool: ConstantPool, index: int) -> str:
    """Class.name:descriptor for a field or method reference."""
    try:
        ref = pool.get(index, FieldRef, MethodRef, InterfaceMethodRef)
    except InvalidConstantReference:
        return _invalid(index)
    return f"{_class_name(pool, ref.class_index)}.{_name_and_type(pool, ref.name_and_type_index)}"


def describe(pool: ConstantPool, entry) -> str:
    """Describe an entry, following its references through ``pool``.

    Dangling references are shown as ``<invalid #N>`` instead of raising.
    """
    if isinstance(entry, Utf8):
        return f"Utf8 {printable(entry.value)}"
    if isinstance(entry, Integer):
        return f"Integer {entry.value}"
    if isinstance(entry, Float):
        return f"Float {entry.value!r}f"
    if isinstance(entry, Long):
        return f"Long {entry.value}l"
    if isinstance(entry, Double):
        return f"Double {entry.value!r}d"
    if isinstance(entry, ClassRef):
        return f"Class {_utf8(pool, entry.name_index)}"
    if isinstance(entry, StringRef):
        return f'String "{_utf8(pool, entry.utf8_index)}"'
    if isinstance(entry, (FieldRef, MethodRef, InterfaceMethodRef)):
        owner = _class_name(pool, entry.class_index)
        return f"{_KIND_NAMES[type(entry)]} {owner}.{_name_and_type(pool, entry.name_and_type_index)}"
    if isinstance(entry, NameAndType):
        return f"NameAndType {_utf8(pool, entry.name_index)}:{_utf8(pool, entry.descriptor_index)}"
    if isinstance(entry, MethodHandle):
        try:
            kind = MethodHandleKind(entry.kind).mnemonic
        except ValueError:
            kind = f"kind{entry.kind}"
        return f"MethodHandle {kind} {_member(pool, entry.reference_index)}"
    if isinstance(entry, MethodType):
        return f"MethodType {_utf8(pool, entry.descriptor_index)}"
    if isinstance(entry, (Dynamic, InvokeDynamic)):
        # bootstrap index points into the BootstrapMethods attribute
        label = "Dynamic" if isinstance(entry, Dynamic) else "InvokeDynamic"
        nat = _name_and_type(pool, entry.name_and_type_index)
        return f"{label} #{entry.bootstrap_method_attr_index}:{nat}"
    if isinstance(entry, Module):
        return f"Module {_utf8(pool, entry.name_index)}"
    if isinstance(entry, Package):
        return f"Package {_utf8(pool, entry.name_index)}"
    raise TypeError(f"Not a constant pool entry: {entry!r}")


def render_entry(pool: ConstantPool, index: int) -> str:
    """Describe the entry at 1-based ``index``."""
    return describe(pool, pool.get(index))


def dump_pool(pool: ConstantPool) -> list[str]:
    """One line per entry, e.g. ``   #1 = Utf8 Foo``."""
    return [f"{'#' + str(index):>5} = {describe(pool, entry)}" for index, entry in pool]
