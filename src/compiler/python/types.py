"""Type utilities: Onyx type spelling → C type string."""

from __future__ import annotations


# Primitive Onyx types → C type strings
_PRIMITIVE_MAP = {
    "i32": "int",
    "u32": "uint32_t",
    "u8": "uint8_t",
    "f32": "float",
    "f64": "double",
    "bool": "bool",
    "str": "char*",
    "ptr": "void*",
    "void": "void",
}


def translate_type(onyx_type: str) -> str:
    """Convert an Onyx type spelling to a C type string.

    Pointer suffixes are peeled off one at a time, so ``u32**`` becomes
    ``uint32_t**``. Names not in the primitive table (user structs, types
    already spelled the C way) are returned unchanged.
    """
    t = onyx_type.strip()
    if t in _PRIMITIVE_MAP:
        return _PRIMITIVE_MAP[t]
    if t.endswith("*"):
        return translate_type(t[:-1]) + "*"
    return t


def split_pointer(onyx_type: str) -> tuple[str, int]:
    """Split ``Vec**`` into ``("Vec", 2)``."""
    t = onyx_type.strip()
    base = t.rstrip("*")
    return base.rstrip(), len(t) - len(base)
