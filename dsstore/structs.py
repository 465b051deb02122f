'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

   structs.py
   ----------
   On-disk layout of the .DS_Store (Desktop Services Store) file.

   All values are big-endian. The file begins with a 4 byte alignment
   value (always 1), followed by the buddy allocator header. Every block
   offset stored in the file is relative to the end of those 4 bytes.

   References:
     https://metacpan.org/pod/distribution/Mac-Finder-DSStore/DSStoreFormat.pod
     https://0day.work/parsing-the-ds_store-file-format/
'''

from construct import *

FILE_ALIGNMENT_VALUE = b'\x00\x00\x00\x01'
BLOCK_ALIGNMENT = 4          # Every block payload begins 4 bytes after its nominal offset
BUDDY_MAGIC = b'Bud1'
HEADER_BLOCK_SIZE = 32

OFFSETS_TABLE_PAGE = 256     # Offsets table is padded to a multiple of this many entries
ADDRESS_SIZE_MASK = 0x1F     # low 5 bits = log2(block size)
FREE_LIST_SIZE_CLASSES = 32

TOC_ENTRY_COUNT = b'\x00\x00\x00\x01'
TOC_DSDB_KEY = b'DSDB'
DSDB_SENTINEL = b'\x00\x00\x10\x00'

MAC_EPOCH_OFFSET = 2082844800 # seconds between 1904/1/1 and 1970/1/1

MAX_TREE_DEPTH = 64

# Header block, at file offset 4
BuddyAllocatorHeader = "BuddyAllocatorHeader" / Struct(
    Const(BUDDY_MAGIC),
    "info_block_offset" / Int32ub,
    "info_block_size" / Int32ub,
    "info_block_offset_check" / Int32ub,
    "unknown" / Bytes(16)
)

# First bytes of the block the TOC 'DSDB' entry points to
DsdbHeader = "DsdbHeader" / Struct(
    "root_node" / Int32ub,
    "num_internals" / Int32ub,
    "num_records" / Int32ub,
    "num_nodes" / Int32ub,
    Const(DSDB_SENTINEL)
)

# BKGD blob sub-structures, after the 4 byte 'DefB'/'ClrB'/'PctB' code
BackgroundColor = "BackgroundColor" / Struct(
    "red" / Int16ub,
    "green" / Int16ub,
    "blue" / Int16ub,
    "unknown" / Bytes(2)
)

BackgroundPicture = "BackgroundPicture" / Struct(
    "pict_blob_length" / Int32ub,
    "unknown" / Bytes(4)
)
