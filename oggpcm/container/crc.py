"""
Ogg page checksum.

CRC-32 with polynomial 0x04C11DB7, initial value 0, no bit reflection and
no final XOR. This is not the zlib CRC, so binascii/zlib cannot be used.
"""

from typing import List

CRC_POLYNOMIAL = 0x04C11DB7


def _build_table() -> List[int]:
    table = []
    for i in range(256):
        r = i << 24
        for _ in range(8):
            if r & 0x80000000:
                r = ((r << 1) ^ CRC_POLYNOMIAL) & 0xFFFFFFFF
            else:
                r = (r << 1) & 0xFFFFFFFF
        table.append(r)
    return table


CRC_TABLE = _build_table()


def ogg_crc(data: bytes, crc: int = 0) -> int:
    """
    Compute the Ogg CRC of data, optionally continuing from a previous value.

    Args:
        data: Bytes to checksum
        crc: Running checksum from a previous call (default: 0)

    Returns:
        32-bit checksum
    """
    table = CRC_TABLE
    for b in data:
        crc = ((crc << 8) & 0xFFFFFFFF) ^ table[((crc >> 24) & 0xFF) ^ b]
    return crc
