'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

   store.py
   --------
   DsStore reads a complete .DS_Store file held in memory.

     store = DsStore(data)
     for filename, attributes in store.contents.items():
         for tag, value in attributes.items():
             ...

   Filenames and ustr values are decoded into new str objects. Blob values
   are memoryview slices of 'data', so the result stays tied to the
   buffer that was passed in (the buffer is kept alive by the views).
'''

import logging

from dsstore.allocator import Allocator
from dsstore.tree import Traverse

log = logging.getLogger('MAIN.DSSTORE.STORE')

class DsStore:
    '''Decodes the whole file on creation.
       Raises a DsStoreError subclass if the data is not a valid .DS_Store file.
    '''
    def __init__(self, data):
        self.allocator = Allocator(data)
        self.directory = Traverse(self.allocator)

    @classmethod
    def FromFile(cls, path):
        with open(path, 'rb') as f:
            data = f.read()
        log.debug('Read {} bytes from {}'.format(len(data), path))
        return cls(data)

    @property
    def contents(self):
        '''{ filename : { tag : RecordValue } } in filename order'''
        return self.directory.records

    def GetAttributes(self, filename):
        '''Returns { tag : RecordValue } for filename, or None if it has no records'''
        return self.directory.records.get(filename, None)

    def __len__(self):
        return len(self.directory.records)

    def __iter__(self):
        return iter(self.directory.records.items())
