'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

'''

class DsStoreError(ValueError):
    '''Base class for all errors raised while decoding a .DS_Store file'''
    pass

class NotEnoughDataError(DsStoreError):
    '''A read would go past the end of the buffer or block'''
    def __init__(self, requested, remaining, pos=0):
        self.requested = requested
        self.remaining = remaining
        self.pos = pos
        super().__init__('Not enough data, wanted {} bytes at position {} but only {} remain'.format(requested, pos, remaining))

class BadDataError(DsStoreError):
    '''A structural check failed (magic, sentinel, blob size, offset check ..)'''
    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)

class InvalidStringError(DsStoreError):
    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)

class BlockDoesntExistError(DsStoreError):
    def __init__(self, block_id, block_count):
        self.block_id = block_id
        self.block_count = block_count
        super().__init__('Block {} does not exist, offsets table has only {} entries'.format(block_id, block_count))

class UnknownStructureTypeError(DsStoreError):
    '''Attribute tag or nested sub-tag not known to the decoder'''
    def __init__(self, structure_type, context=''):
        self.structure_type = structure_type
        msg = 'Unknown structure type {!r}'.format(structure_type)
        if context:
            msg += ' in ' + context
        super().__init__(msg)

class CyclicTreeError(BadDataError):
    '''B-tree child pointers loop back or nest deeper than allowed'''
    def __init__(self, reason, block_id, depth):
        self.block_id = block_id
        self.depth = depth
        super().__init__(reason)
