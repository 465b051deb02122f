'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

   values.py
   ---------
   Decoded record values.

   BLOB values are memoryview slices that point into the buffer the
   DsStore object was created from, so they keep that buffer alive.
   Use bytes(value) or value.tobytes() to get a standalone copy.
   USTR values and filenames are ordinary str objects.
'''

from enum import Enum, IntEnum

class ValueKind(IntEnum):
    BOOL       = 1  # bool
    SHORT      = 2  # int, 16 bit signed
    LONG       = 3  # int, 32 bit signed
    COMP       = 4  # int, 64 bit signed
    BLOB       = 5  # memoryview
    USTR       = 6  # str
    TIMESTAMP  = 7  # datetime (UTC)
    BACKGROUND = 8  # Background
    VIEW_STYLE = 9  # ViewStyle

class ViewStyle(Enum):
    ICON = 'icnv'
    COLUMN = 'clmv'
    LIST = 'Nlsv'
    COVER_FLOW = 'Flwv'

class BackgroundType(IntEnum):
    DEFAULT = 1
    COLOR   = 2
    PICTURE = 3

class Background:
    '''Folder background from the BKGD record.
       For COLOR, red/green/blue hold the 16 bit components.
       For PICTURE, pict_blob_length is the length of the 'pict' record blob.
    '''
    def __init__(self, bg_type, red=0, green=0, blue=0, pict_blob_length=0):
        self.type = bg_type
        self.red = red
        self.green = green
        self.blue = blue
        self.pict_blob_length = pict_blob_length

    @classmethod
    def Default(cls):
        return cls(BackgroundType.DEFAULT)

    @classmethod
    def Color(cls, red, green, blue):
        return cls(BackgroundType.COLOR, red, green, blue)

    @classmethod
    def Picture(cls, pict_blob_length):
        return cls(BackgroundType.PICTURE, pict_blob_length=pict_blob_length)

    def __eq__(self, other):
        if not isinstance(other, Background):
            return NotImplemented
        return (self.type, self.red, self.green, self.blue, self.pict_blob_length) == \
               (other.type, other.red, other.green, other.blue, other.pict_blob_length)

    def __repr__(self):
        if self.type == BackgroundType.COLOR:
            return 'Background(COLOR, rgb=({}, {}, {}))'.format(self.red, self.green, self.blue)
        if self.type == BackgroundType.PICTURE:
            return 'Background(PICTURE, pict_blob_length={})'.format(self.pict_blob_length)
        return 'Background(DEFAULT)'

class RecordValue:
    '''A decoded value, tagged with its ValueKind'''

    def __init__(self, kind, value):
        self.kind = kind
        self.value = value

    def __eq__(self, other):
        if not isinstance(other, RecordValue):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __repr__(self):
        value = self.value
        if self.kind == ValueKind.BLOB:
            value = bytes(value)
        return 'RecordValue({}, {!r})'.format(self.kind.name, value)

    def ToText(self):
        '''Printable form of the value, used for console and csv output'''
        if self.kind == ValueKind.BLOB:
            return self.value.hex()
        elif self.kind == ValueKind.TIMESTAMP:
            return self.value.strftime('%Y-%m-%d %H:%M:%S')
        elif self.kind == ValueKind.VIEW_STYLE:
            return self.value.name
        return str(self.value)
