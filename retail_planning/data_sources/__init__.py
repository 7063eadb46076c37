"""Data source helpers: planning record codec and the demo roster."""

from .persistence import (
    LoadResult,
    dump_records,
    frame_to_records,
    load_records,
    read_records_csv,
    read_records_json,
    records_to_frame,
    write_records_csv,
    write_records_json,
)
from .sample import SAMPLE_SKUS, SAMPLE_STORES, sample_patches, sample_roster

__all__ = [
    "LoadResult",
    "dump_records",
    "load_records",
    "records_to_frame",
    "frame_to_records",
    "read_records_json",
    "write_records_json",
    "read_records_csv",
    "write_records_csv",
    "SAMPLE_STORES",
    "SAMPLE_SKUS",
    "sample_roster",
    "sample_patches",
]
