import numpy as np
import pyarrow as pa
import pyarrow.compute as pc


class BitTable:
    """Fixed-length bit array packed into a numpy byte buffer.

    Bits are stored least-significant first within each byte, the same layout
    Arrow uses for boolean arrays, so the table can be handed to
    ``pyarrow.compute`` without copying.

    Attributes:
        length (int): Number of addressable bits.

    Example:
        >>> t = BitTable(10)
        >>> t.set(3)
        >>> t.get(3), t.get(4)
        (True, False)
        >>> t.popcount()
        1
    """
    def __init__(self, length: int):
        if length <= 0:
            raise ValueError("length must be positive")
        self.length = length
        self._bits = np.zeros((length + 7) // 8, dtype=np.uint8)

    def __len__(self) -> int:
        return self.length

    def _locate(self, index: int):
        if not 0 <= index < self.length:
            raise IndexError(f"bit index {index} out of range for table of {self.length}")
        return index >> 3, np.uint8(1 << (index & 7))

    def get(self, index: int) -> bool:
        byte, mask = self._locate(index)
        return bool(self._bits[byte] & mask)

    def set(self, index: int):
        """Set bit ``index``; setting an already-set bit is a no-op"""
        byte, mask = self._locate(index)
        self._bits[byte] |= mask

    def to_arrow(self) -> pa.BooleanArray:
        """Zero-copy Arrow view of the bits"""
        return pa.Array.from_buffers(
            pa.bool_(), self.length, [None, pa.py_buffer(self._bits)], null_count=0
        )

    def popcount(self) -> int:
        """Number of set bits"""
        return pc.sum(self.to_arrow()).as_py() or 0

    def to_bytes(self) -> bytes:
        return self._bits.tobytes()
