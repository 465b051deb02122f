'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

   cursor.py
   ---------
   Bounds checked big-endian reader over a slice of the .DS_Store buffer.
   Blob reads return memoryview slices of the original buffer, nothing
   is copied. Strings are decoded into new str objects.
'''

import struct

from construct import ConstError, ConstructError

from dsstore.errors import BadDataError, InvalidStringError, NotEnoughDataError

class Cursor:

    def __init__(self, data, pos=0):
        '''data can be bytes, bytearray or memoryview'''
        self.data = data if isinstance(data, memoryview) else memoryview(data)
        self.pos = pos

    def __len__(self):
        return len(self.data)

    @property
    def remaining(self):
        return len(self.data) - self.pos

    def _CheckLength(self, size):
        if size < 0 or self.remaining < size:
            raise NotEnoughDataError(size, self.remaining, self.pos)

    def _Unpack(self, fmt, size):
        self._CheckLength(size)
        num = struct.unpack_from(fmt, self.data, self.pos)[0]
        self.pos += size
        return num

    def ReadUInt8(self):
        return self._Unpack('>B', 1)

    def ReadUInt16(self):
        return self._Unpack('>H', 2)

    def ReadUInt32(self):
        return self._Unpack('>I', 4)

    def ReadUInt64(self):
        return self._Unpack('>Q', 8)

    def ReadInt16(self):
        return self._Unpack('>h', 2)

    def ReadInt32(self):
        return self._Unpack('>i', 4)

    def ReadInt64(self):
        return self._Unpack('>q', 8)

    def Skip(self, size):
        '''Skip padding or reserved bytes'''
        self._CheckLength(size)
        self.pos += size

    def ReadBytes(self, size):
        '''Returns a memoryview over the next size bytes'''
        self._CheckLength(size)
        view = self.data[self.pos : self.pos + size]
        self.pos += size
        return view

    def ReadExact(self, expected, reason):
        '''Consumes len(expected) bytes, raises BadDataError(reason) if they differ'''
        found = self.ReadBytes(len(expected))
        if found != expected:
            raise BadDataError('{} (expected {}, found {})'.format(reason, bytes(expected).hex(), found.hex()))

    def ReadBlob(self):
        '''4 byte length followed by that many bytes, returned as memoryview'''
        size = self.ReadUInt32()
        try:
            return self.ReadBytes(size)
        except NotEnoughDataError:
            self.pos -= 4
            raise

    def ReadUtf16String(self):
        '''4 byte count of UTF-16 code units, followed by the big-endian units'''
        count = self.ReadUInt32()
        try:
            raw = self.ReadBytes(count * 2)
        except NotEnoughDataError:
            self.pos -= 4
            raise
        try:
            return str(raw, 'utf-16-be')
        except UnicodeDecodeError as ex:
            raise InvalidStringError('Invalid UTF-16 string at position {}: {}'.format(self.pos - len(raw), str(ex)))

    def ReadTag(self):
        '''Reads a four character code such as 'Iloc' or 'blob' '''
        raw = self.ReadBytes(4)
        try:
            return str(raw, 'ascii')
        except UnicodeDecodeError:
            raise InvalidStringError('Four character code is not ASCII: 0x{}'.format(raw.hex()))

    def ReadStruct(self, con_struct):
        '''Parses a fixed size construct Struct at the current position'''
        size = con_struct.sizeof()
        raw = self.ReadBytes(size)
        try:
            return con_struct.parse(bytes(raw))
        except ConstError as ex:
            raise BadDataError('{} failed validation: {}'.format(con_struct.name, str(ex)))
        except ConstructError as ex:
            raise BadDataError('Could not parse {}: {}'.format(con_struct.name, str(ex)))
