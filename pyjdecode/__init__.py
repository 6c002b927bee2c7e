"""pyjdecode - Java class file constant pool decoder."""

from .classfile import AccessFlags, ClassFileVersion, ConstantPoolTag, MethodHandleKind
from .classreader import ClassFile, ClassPath, decode, read_class_file
from .constants import ConstantPool
from .errors import (
    AllocationFailure,
    ClassFormatError,
    ConstantPoolOverrun,
    InvalidConstantReference,
    InvalidMagic,
    TruncatedInput,
    UnknownConstantTag,
)

__version__ = "0.1.0"
__all__ = [
    "AccessFlags",
    "AllocationFailure",
    "ClassFile",
    "ClassFileVersion",
    "ClassFormatError",
    "ClassPath",
    "ConstantPool",
    "ConstantPoolOverrun",
    "ConstantPoolTag",
    "InvalidConstantReference",
    "InvalidMagic",
    "MethodHandleKind",
    "TruncatedInput",
    "UnknownConstantTag",
    "decode",
    "read_class_file",
]
