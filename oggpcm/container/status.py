"""Outcome of a demultiplex step (page capture or packet reassembly)."""

import enum


class DemuxStatus(enum.IntEnum):
    """Result codes shared by OggSync.pageout() and OggStreamState.packetout()."""
    HOLE = -1  # Boundary loss: bytes skipped or pages missing
    NEED_MORE = 0  # Not enough data staged yet
    READY = 1  # A unit was returned
