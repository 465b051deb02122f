'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

   tree.py
   -------
   Walks the directory B-tree ('DSDB') of a .DS_Store file.

   Node layout:
     pair_count == 0  ->  leaf:      record_count | record_count x record
     pair_count != 0  ->  internal:  pair_count x [ child block id | record ]

   Records come out in filename order (in-order walk).
'''

import logging

from dsstore.decoder import ReadRecord
from dsstore.errors import CyclicTreeError
from dsstore.structs import DsdbHeader, MAX_TREE_DEPTH

log = logging.getLogger('MAIN.DSSTORE.TREE')

class Directory:
    '''Result of a traversal. records is { filename : { tag : RecordValue } }'''

    def __init__(self, num_internals, num_nodes, num_records, records):
        self.num_internals = num_internals
        self.num_nodes = num_nodes
        self.num_records = num_records  # as declared in the DSDB header
        self.records = records

    def __len__(self):
        return len(self.records)

    def __repr__(self):
        return 'Directory(num_internals={}, num_nodes={}, num_records={}, entries={})'.format(
                self.num_internals, self.num_nodes, self.num_records, len(self.records))

def ReadDsdbHeader(allocator):
    header = allocator.GetBlock(allocator.dsdb_location).ReadStruct(DsdbHeader)
    log.debug('DSDB root node={} internals={} records={} nodes={}'.format(
                header.root_node, header.num_internals, header.num_records, header.num_nodes))
    return header

def WalkNode(allocator, block_id, callback, visited=None, depth=0):
    '''Calls callback(record) for every record under block_id, in order'''
    if visited is None:
        visited = set()
    if block_id in visited:
        raise CyclicTreeError('B-tree node {} was already visited, tree has a cycle'.format(block_id), block_id, depth)
    if depth > MAX_TREE_DEPTH:
        raise CyclicTreeError('B-tree is deeper than {} levels at node {}'.format(MAX_TREE_DEPTH, block_id), block_id, depth)
    visited.add(block_id)

    block = allocator.GetBlock(block_id)
    pair_count = block.ReadUInt32()
    if pair_count == 0: # leaf
        count = block.ReadUInt32()
        for _ in range(count):
            callback(ReadRecord(block))
    else:
        for _ in range(pair_count):
            child = block.ReadUInt32()
            WalkNode(allocator, child, callback, visited, depth + 1)
            callback(ReadRecord(block))

def Traverse(allocator):
    '''Reads the whole tree, returns a Directory.
       Raises DsStoreError on any problem, nothing partial is returned.
    '''
    header = ReadDsdbHeader(allocator)
    records = {}

    def AddRecord(record):
        attributes = records.setdefault(record.filename, {})
        if record.tag in attributes:
            log.warning("Duplicate tag '{}' for '{}', keeping last value".format(record.tag, record.filename))
        attributes[record.tag] = record.value

    WalkNode(allocator, header.root_node, AddRecord)
    log.debug('Read {} entries'.format(len(records)))
    return Directory(header.num_internals, header.num_nodes, header.num_records, records)
