'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

   allocator.py
   ------------
   The buddy allocator that partitions a .DS_Store file into blocks.

   Layout of the info (bookkeeping) block:
     num_offsets | 0x00000000 | num_offsets x block address | padding
     TOC count (1) | key_len (4) | 'DSDB' | block id
     32 x [ count | count x block id ]    (free list)

   A block address packs the offset (high 27 bits) and the log2 of
   the block size (low 5 bits).
'''

import logging

from dsstore.cursor import Cursor
from dsstore.errors import BlockDoesntExistError, NotEnoughDataError, BadDataError
from dsstore.structs import *

log = logging.getLogger('MAIN.DSSTORE.ALLOCATOR')

def DecodeAddress(address):
    '''Returns (offset, size) for a packed block address'''
    offset = address & ~ADDRESS_SIZE_MASK & 0xFFFFFFFF
    size = 1 << (address & ADDRESS_SIZE_MASK)
    return offset, size

def PaddingForOffsetCount(num_offsets):
    '''Bytes of padding after the offsets table, it fills up a page of 256 entries'''
    return (OFFSETS_TABLE_PAGE - (num_offsets % OFFSETS_TABLE_PAGE)) * 4

class Allocator:
    '''Parses the header and bookkeeping info on creation, read-only after that.

       Raises a DsStoreError subclass if the data is truncated or corrupted.
    '''

    def __init__(self, data):
        self.data = data if isinstance(data, memoryview) else memoryview(data)
        self.offsets = []      # block addresses, index = block id
        self.toc = {}          # { 'DSDB': block_id }
        self.free_list = []    # 32 lists of free entries, index = log2(size)

        file_cursor = Cursor(self.data)
        file_cursor.ReadExact(FILE_ALIGNMENT_VALUE, 'First 4 bytes of file must be 00000001')

        header_block = self._MakeBlock(0, HEADER_BLOCK_SIZE)
        self.info_block_offset, self.info_block_size = self._ReadHeader(header_block)

        info_block = self._MakeBlock(self.info_block_offset, self.info_block_size)
        self.offsets = self._ReadOffsets(info_block)
        self.toc = self._ReadToc(info_block)
        self.free_list = self._ReadFreeList(info_block)
        log.debug('Allocator ready: {} offsets, DSDB at block {}'.format(len(self.offsets), self.dsdb_location))

    @property
    def dsdb_location(self):
        return self.toc[TOC_DSDB_KEY.decode('ascii')]

    def _MakeBlock(self, offset, size):
        '''Cursor over the block payload, which starts BLOCK_ALIGNMENT bytes after offset'''
        start = offset + BLOCK_ALIGNMENT
        end = start + size
        if end > len(self.data):
            raise NotEnoughDataError(size, max(len(self.data) - start, 0), start)
        return Cursor(self.data[start:end])

    def _ReadHeader(self, block):
        header = block.ReadStruct(BuddyAllocatorHeader)
        if header.info_block_offset != header.info_block_offset_check:
            raise BadDataError('Info block offset check failed, 0x{:X} != 0x{:X}'.format(
                                header.info_block_offset, header.info_block_offset_check))
        log.debug('Info block @ 0x{:X} size=0x{:X}'.format(header.info_block_offset, header.info_block_size))
        return header.info_block_offset, header.info_block_size

    def _ReadOffsets(self, block):
        num_offsets = block.ReadUInt32()
        block.ReadExact(b'\x00\x00\x00\x00', 'Reserved bytes after offset count are not zero')
        offsets = [block.ReadUInt32() for _ in range(num_offsets)]
        block.Skip(PaddingForOffsetCount(num_offsets))
        return offsets

    def _ReadToc(self, block):
        # Only one key has ever been seen in the table of contents
        block.ReadExact(TOC_ENTRY_COUNT, 'TOC must have exactly 1 entry')
        block.ReadExact(bytes([len(TOC_DSDB_KEY)]), 'TOC key length must be 4')
        block.ReadExact(TOC_DSDB_KEY, 'TOC key must be DSDB')
        return { TOC_DSDB_KEY.decode('ascii') : block.ReadUInt32() }

    def _ReadFreeList(self, block):
        free_list = []
        for _ in range(FREE_LIST_SIZE_CLASSES):
            count = block.ReadUInt32()
            free_list.append([block.ReadUInt32() for _ in range(count)])
        return free_list

    def GetBlock(self, block_id):
        '''Returns a Cursor over the block's payload'''
        if block_id < 0 or block_id >= len(self.offsets):
            raise BlockDoesntExistError(block_id, len(self.offsets))
        offset, size = DecodeAddress(self.offsets[block_id])
        return self._MakeBlock(offset, size)
