"""
Java class file constants: magic, versions, access flags and constant pool tags.
"""

from enum import IntEnum, IntFlag


MAGIC = 0xCAFEBABE


class ClassFileVersion:
    JAVA_6 = (50, 0)
    JAVA_7 = (51, 0)
    JAVA_8 = (52, 0)
    JAVA_11 = (55, 0)
    JAVA_17 = (61, 0)


class AccessFlags(IntFlag):
    PUBLIC = 0x0001
    FINAL = 0x0010
    SUPER = 0x0020  # invokespecial semantics
    INTERFACE = 0x0200
    ABSTRACT = 0x0400
    SYNTHETIC = 0x1000
    ANNOTATION = 0x2000
    ENUM = 0x4000
    MODULE = 0x8000


class ConstantPoolTag(IntEnum):
    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    DYNAMIC = 17
    INVOKE_DYNAMIC = 18
    MODULE = 19
    PACKAGE = 20


# Long and Double take two slots
WIDE_TAGS = frozenset({ConstantPoolTag.LONG, ConstantPoolTag.DOUBLE})


class MethodHandleKind(IntEnum):
    GET_FIELD = 1
    GET_STATIC = 2
    PUT_FIELD = 3
    PUT_STATIC = 4
    INVOKE_VIRTUAL = 5
    INVOKE_STATIC = 6
    INVOKE_SPECIAL = 7
    NEW_INVOKE_SPECIAL = 8
    INVOKE_INTERFACE = 9

    @property
    def mnemonic(self) -> str:
        """Bytecode-style name, e.g. ``invokestatic``."""
        return self.name.lower().replace("_", "")
