'''
   Copyright (c) 2017 Yogesh Khatri

   This file is part of mac_apt (macOS Artifact Parsing Tool).
   Usage or distribution of this software/code is subject to the
   terms of the MIT License.

   decoder.py
   ----------
   Decodes a single record of the .DS_Store directory B-tree.

   A record is
     filename (UTF-16BE, length prefixed) | tag (4 bytes) | type (4 bytes) | data
   where type is one of bool, long, shor, comp, dutc, type, blob, ustr.
   Each known tag always uses the same type, this is verified.

   Tag meanings, from the Mac::Finder::DSStore documentation:
     BKGD  folder background (12 byte blob)
     ICVO  icon view options (bool)
     Iloc  icon location (16 byte blob)
     LSVO  list view options (bool)
     bwsp  browser window settings (binary plist)
     cmmt  Spotlight comment
     dilc  desktop icon location (32 byte blob)
     dscl  open in list view (bool)
     extn  file extension
     fwi0  Finder window info (16 byte blob)
     fwsw  Finder window sidebar width
     fwvh  Finder window vertical height
     GRP0  group by
     icgo, icsp  unknown, icon view (8 byte blobs)
     icvo  icon view options (18 or 26 byte blob)
     icvp  icon view properties (binary plist)
     icvt  icon label text size
     info  unknown (40 or 48 byte blob)
     logS, lg1S  logical size
     lssp  list view scroll position (8 byte blob)
     lsvo  list view options (76 byte blob)
     lsvp, lsvP  list view properties (binary plist)
     lsvt  list view text size
     modD, moDD  modification date
     phyS, ph1S  physical size
     pict  background picture (alias record)
     ptbL, ptbN  put-back location and name (Trash)
     vSrn  unknown, always 1
     vstl  view style
'''

import datetime
import logging

from dsstore.cursor import Cursor
from dsstore.errors import BadDataError, UnknownStructureTypeError
from dsstore.structs import BackgroundColor, BackgroundPicture, MAC_EPOCH_OFFSET
from dsstore.values import Background, RecordValue, ValueKind, ViewStyle

log = logging.getLogger('MAIN.DSSTORE.DECODER')

def ReadMacTimestamp(mac_time):
    '''Converts a dutc value to a (naive, UTC) datetime.
       The value is seconds since 1904/1/1, shifted to the unix epoch.
    '''
    try:
        return datetime.datetime(1970, 1, 1) + datetime.timedelta(seconds=mac_time + MAC_EPOCH_OFFSET)
    except (ValueError, OverflowError) as ex:
        raise BadDataError('Timestamp value {} is out of range: {}'.format(mac_time, str(ex)))

class Record:
    def __init__(self, filename, tag, value):
        self.filename = filename
        self.tag = tag
        self.value = value

    def __repr__(self):
        return 'Record({!r}, {!r}, {!r})'.format(self.filename, self.tag, self.value)

# Primitive decoders, one per type code

def _ReadBool(cursor, tag):
    return RecordValue(ValueKind.BOOL, cursor.ReadUInt8() != 0)

def _ReadLong(cursor, tag):
    return RecordValue(ValueKind.LONG, cursor.ReadInt32())

def _ReadShort(cursor, tag):
    cursor.Skip(2) # stored in 4 bytes, first 2 are always zero
    return RecordValue(ValueKind.SHORT, cursor.ReadInt16())

def _ReadComp(cursor, tag):
    return RecordValue(ValueKind.COMP, cursor.ReadInt64())

def _ReadDate(cursor, tag):
    return RecordValue(ValueKind.TIMESTAMP, ReadMacTimestamp(cursor.ReadInt64()))

def _ReadUStr(cursor, tag):
    return RecordValue(ValueKind.USTR, cursor.ReadUtf16String())

def _ReadBlob(cursor, tag):
    return RecordValue(ValueKind.BLOB, cursor.ReadBlob())

def _FixedBlobReader(*valid_sizes):
    '''Returns a decoder for blobs that must be one of valid_sizes bytes long'''
    def _ReadFixedBlob(cursor, tag):
        blob = cursor.ReadBlob()
        if len(blob) not in valid_sizes:
            raise BadDataError('{} blob must be {} bytes long, found {}'.format(
                                tag, ' or '.join(str(x) for x in valid_sizes), len(blob)))
        return RecordValue(ValueKind.BLOB, blob)
    return _ReadFixedBlob

def _ReadBackground(cursor, tag):
    blob = Cursor(cursor.ReadBlob())
    bg_type = blob.ReadTag()
    if bg_type == 'DefB':
        blob.Skip(8)
        background = Background.Default()
    elif bg_type == 'ClrB':
        color = blob.ReadStruct(BackgroundColor)
        background = Background.Color(color.red, color.green, color.blue)
    elif bg_type == 'PctB':
        pict = blob.ReadStruct(BackgroundPicture)
        background = Background.Picture(pict.pict_blob_length)
    else:
        raise UnknownStructureTypeError(bg_type, tag)
    return RecordValue(ValueKind.BACKGROUND, background)

def _ReadViewStyle(cursor, tag):
    code = cursor.ReadTag()
    try:
        style = ViewStyle(code)
    except ValueError:
        raise UnknownStructureTypeError(code, tag)
    return RecordValue(ValueKind.VIEW_STYLE, style)

# tag : (type code, decoder)
TAG_DECODERS = {
    'ICVO' : (b'bool', _ReadBool),
    'LSVO' : (b'bool', _ReadBool),
    'dscl' : (b'bool', _ReadBool),

    'fwsw' : (b'long', _ReadLong),
    'vSrn' : (b'long', _ReadLong),

    'fwvh' : (b'shor', _ReadShort),
    'icvt' : (b'shor', _ReadShort),
    'lsvt' : (b'shor', _ReadShort),

    'cmmt' : (b'ustr', _ReadUStr),
    'extn' : (b'ustr', _ReadUStr),
    'GRP0' : (b'ustr', _ReadUStr),
    'ptbL' : (b'ustr', _ReadUStr),
    'ptbN' : (b'ustr', _ReadUStr),

    'logS' : (b'comp', _ReadComp),
    'lg1S' : (b'comp', _ReadComp),
    'phyS' : (b'comp', _ReadComp),
    'ph1S' : (b'comp', _ReadComp),

    'modD' : (b'dutc', _ReadDate),
    'moDD' : (b'dutc', _ReadDate),

    'Iloc' : (b'blob', _FixedBlobReader(16)),
    'dilc' : (b'blob', _FixedBlobReader(32)),
    'fwi0' : (b'blob', _FixedBlobReader(16)),
    'icgo' : (b'blob', _FixedBlobReader(8)),
    'icsp' : (b'blob', _FixedBlobReader(8)),
    'lssp' : (b'blob', _FixedBlobReader(8)),
    'lsvo' : (b'blob', _FixedBlobReader(76)),
    'icvo' : (b'blob', _FixedBlobReader(18, 26)),
    'info' : (b'blob', _FixedBlobReader(40, 48)),

    'bwsp' : (b'blob', _ReadBlob),
    'icvp' : (b'blob', _ReadBlob),
    'lsvp' : (b'blob', _ReadBlob),
    'lsvP' : (b'blob', _ReadBlob),
    'pict' : (b'blob', _ReadBlob),

    'BKGD' : (b'blob', _ReadBackground),

    'vstl' : (b'type', _ReadViewStyle),
}

def ReadRecordValue(cursor, tag):
    '''Verifies the type code that follows a tag and decodes the value'''
    try:
        type_code, decoder = TAG_DECODERS[tag]
    except KeyError:
        raise UnknownStructureTypeError(tag, 'record tag')
    cursor.ReadExact(type_code, "Tag '{}' must have type '{}'".format(tag, type_code.decode('ascii')))
    return decoder(cursor, tag)

def ReadRecord(cursor):
    '''Reads one record at the cursor position, returns Record'''
    filename = cursor.ReadUtf16String()
    tag = cursor.ReadTag()
    value = ReadRecordValue(cursor, tag)
    return Record(filename, tag, value)
