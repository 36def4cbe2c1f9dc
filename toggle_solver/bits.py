import base64
import math

from attrs import define, field


def _byte_count(length: int) -> int:
    return math.ceil(length / 8)


@define
class BitVector:
    """
    Fixed length sequence of booleans packed LSB first into bytes.

    Bit ``i`` lives in byte ``i // 8`` at position ``i % 8``.
    """

    data: bytearray = field(converter=bytearray)
    length: int

    @classmethod
    def zeros(cls, length: int) -> "BitVector":
        return cls(data=bytearray(_byte_count(length)), length=length)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "BitVector":
        return cls(data=bytearray(raw), length=len(raw) * 8)

    def __len__(self) -> int:
        return self.length

    def __str__(self) -> str:
        return "".join("1" if self.get(i) else "0" for i in range(self.length))

    def _check(self, index: int) -> None:
        if not 0 <= index < self.length:
            raise IndexError(f"bit index {index} out of range for length {self.length}")

    def get(self, index: int) -> bool:
        self._check(index)
        return (self.data[index // 8] >> (index % 8)) & 1 == 1

    def set(self, index: int, value: bool) -> None:
        self._check(index)
        mask = 1 << (index % 8)
        if value:
            self.data[index // 8] |= mask
        else:
            self.data[index // 8] &= ~mask & 0xFF

    def resize(self, length: int) -> None:
        if length < self.length:
            raise ValueError(f"cannot shrink from {self.length} to {length} bits")
        missing = _byte_count(length) - len(self.data)
        if missing > 0:
            self.data.extend(bytes(missing))
        self.length = length

    def copy(self) -> "BitVector":
        return BitVector(data=bytearray(self.data), length=self.length)

    def canonical_key(self) -> str:
        return base64.b64encode(bytes(self.data)).decode("ascii")

    def hamming_distance(self, other: "BitVector") -> int:
        if self.length != other.length:
            raise ValueError(
                f"cannot compare bit vectors of length {self.length} and {other.length}"
            )
        return sum((a ^ b).bit_count() for a, b in zip(self.data, other.data))
