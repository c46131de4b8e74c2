FNV_OFFSET_BASIS = 0x811c9dc5
FNV_PRIME = 0x01000193

_MASK32 = 0xFFFFFFFF


def to_int32(x: int) -> int:
    """Wrap an integer to the signed 32-bit range"""
    x &= _MASK32
    return x - (1 << 32) if x & 0x80000000 else x


def fnv1a_32(s: str) -> int:
    """32-bit FNV hash over the code points of ``s``, XOR-then-multiply order.

    Each code point is XORed into the accumulator before the multiply, and the
    accumulator is reduced modulo 2**32 after every step. Returns the unsigned
    value.

    Example:
        >>> hex(fnv1a_32("a"))
        '0xe40c292c'
    """
    h = FNV_OFFSET_BASIS
    for c in s:
        h ^= ord(c)
        h = (h * FNV_PRIME) & _MASK32
    return h


def xor_mix(s: str) -> int:
    """XOR of all code points multiplied by the string length"""
    h = 0
    for c in s:
        h ^= ord(c)
    return h * len(s)
