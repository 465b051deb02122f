import datetime
import struct

import pytest

from dsstore.cursor import Cursor
from dsstore.decoder import ReadMacTimestamp, ReadRecord, TAG_DECODERS
from dsstore.errors import BadDataError, InvalidStringError, NotEnoughDataError, UnknownStructureTypeError
from dsstore.values import Background, BackgroundType, RecordValue, ValueKind, ViewStyle

from dsstore_builder import (BlobRecord, BoolRecord, CompRecord, DateRecord, EncodeRecord, LongRecord,
                             ShortRecord, TypeRecord, UstrRecord, Utf16)

def Decode(encoded):
    cursor = Cursor(encoded)
    record = ReadRecord(cursor)
    assert cursor.remaining == 0
    return record

def test_bool():
    for tag in ('ICVO', 'LSVO', 'dscl'):
        record = Decode(BoolRecord('folder', tag, True))
        assert record.filename == 'folder'
        assert record.tag == tag
        assert record.value == RecordValue(ValueKind.BOOL, True)
    assert Decode(BoolRecord('.', 'dscl', False)).value.value is False

def test_long():
    assert Decode(LongRecord('.', 'fwsw', 181)).value == RecordValue(ValueKind.LONG, 181)
    assert Decode(LongRecord('.', 'vSrn', -1)).value == RecordValue(ValueKind.LONG, -1)

def test_short_skips_padding():
    for tag in ('fwvh', 'icvt', 'lsvt'):
        assert Decode(ShortRecord('.', tag, -12)).value == RecordValue(ValueKind.SHORT, -12)

def test_ustr():
    for tag in ('cmmt', 'extn', 'GRP0', 'ptbL', 'ptbN'):
        record = Decode(UstrRecord('résumé.pdf', tag, 'Spotlight comment ✓'))
        assert record.filename == 'résumé.pdf'
        assert record.value == RecordValue(ValueKind.USTR, 'Spotlight comment ✓')

def test_comp():
    for tag in ('logS', 'lg1S', 'phyS', 'ph1S'):
        assert Decode(CompRecord('big.iso', tag, 4700000000)).value == RecordValue(ValueKind.COMP, 4700000000)
    assert Decode(CompRecord('x', 'logS', -5)).value.value == -5

def test_timestamp():
    record = Decode(DateRecord('a.txt', 'modD', 0))
    assert record.value.kind == ValueKind.TIMESTAMP
    assert record.value.value == datetime.datetime(1970, 1, 1) + datetime.timedelta(seconds=2082844800)
    assert record.value.value == datetime.datetime(2036, 1, 2)
    assert Decode(DateRecord('a.txt', 'moDD', -2082844800)).value.value == datetime.datetime(1970, 1, 1)

def test_timestamp_out_of_range():
    with pytest.raises(BadDataError):
        ReadMacTimestamp(0x7FFFFFFFFFFFFFFF)
    with pytest.raises(BadDataError):
        Decode(DateRecord('a.txt', 'modD', -0x7FFFFFFFFFFFFFFF))

def test_fixed_length_blobs():
    sizes = { 'Iloc' : 16, 'dilc' : 32, 'fwi0' : 16, 'icgo' : 8, 'icsp' : 8, 'lssp' : 8, 'lsvo' : 76 }
    for tag, size in sizes.items():
        data = bytes(range(size))
        record = Decode(BlobRecord('x', tag, data))
        assert record.value.kind == ValueKind.BLOB
        assert record.value.value == data
        with pytest.raises(BadDataError):
            Decode(BlobRecord('x', tag, data + b'\x00'))
        with pytest.raises(BadDataError):
            Decode(BlobRecord('x', tag, data[:-1]))

def test_iloc_wrong_length_is_rejected():
    with pytest.raises(BadDataError) as exc_info:
        Decode(BlobRecord('a.txt', 'Iloc', b'\x00' * 15))
    assert 'Iloc' in str(exc_info.value)

def test_two_length_blobs():
    for tag, good, bad in (('icvo', (18, 26), 20), ('info', (40, 48), 44)):
        for size in good:
            assert len(Decode(BlobRecord('x', tag, b'\x01' * size)).value.value) == size
        with pytest.raises(BadDataError):
            Decode(BlobRecord('x', tag, b'\x01' * bad))

def test_variable_blobs():
    for tag in ('bwsp', 'icvp', 'lsvp', 'lsvP', 'pict'):
        data = b'bplist00' + b'\x00' * 37
        assert Decode(BlobRecord('.', tag, data)).value == RecordValue(ValueKind.BLOB, data)
    assert Decode(BlobRecord('.', 'pict', b'')).value.value == b''

def test_blob_references_input():
    encoded = BlobRecord('x', 'Iloc', b'\x00\x00\x00\x10\x00\x00\x00\x20' + b'\xff' * 8)
    value = Decode(encoded).value.value
    assert isinstance(value, memoryview)
    assert value.obj is encoded

def test_background_default():
    record = Decode(BlobRecord('.', 'BKGD', b'DefB' + b'\x00' * 8))
    assert record.value == RecordValue(ValueKind.BACKGROUND, Background.Default())
    assert record.value.value.type == BackgroundType.DEFAULT

def test_background_color():
    record = Decode(BlobRecord('.', 'BKGD', b'ClrB' + struct.pack('>HHH', 0xFFFF, 0x8000, 0x0101) + b'\x00\x00'))
    background = record.value.value
    assert background.type == BackgroundType.COLOR
    assert (background.red, background.green, background.blue) == (0xFFFF, 0x8000, 0x0101)

def test_background_picture():
    record = Decode(BlobRecord('.', 'BKGD', b'PctB' + struct.pack('>I', 1234) + b'\x00' * 4))
    assert record.value.value == Background.Picture(1234)

def test_background_unknown_subtype():
    with pytest.raises(UnknownStructureTypeError) as exc_info:
        Decode(BlobRecord('.', 'BKGD', b'XyzB' + b'\x00' * 8))
    assert exc_info.value.structure_type == 'XyzB'

def test_background_truncated():
    with pytest.raises(NotEnoughDataError):
        Decode(BlobRecord('.', 'BKGD', b'ClrB\x00\x01'))

def test_view_style():
    expected = { b'icnv' : ViewStyle.ICON, b'clmv' : ViewStyle.COLUMN, b'Nlsv' : ViewStyle.LIST, b'Flwv' : ViewStyle.COVER_FLOW }
    for code, style in expected.items():
        assert Decode(TypeRecord('.', 'vstl', code)).value == RecordValue(ValueKind.VIEW_STYLE, style)

def test_view_style_unknown():
    with pytest.raises(UnknownStructureTypeError) as exc_info:
        Decode(TypeRecord('.', 'vstl', b'glyv'))
    assert exc_info.value.structure_type == 'glyv'

def test_type_code_mismatch():
    with pytest.raises(BadDataError):
        Decode(EncodeRecord('a.txt', 'Iloc', b'long', b'\x00\x00\x00\x01'))
    with pytest.raises(BadDataError):
        Decode(EncodeRecord('a.txt', 'modD', b'comp', b'\x00' * 8))

def test_unknown_tag():
    with pytest.raises(UnknownStructureTypeError) as exc_info:
        Decode(EncodeRecord('a.txt', 'zzzz', b'blob', b'\x00\x00\x00\x00'))
    assert exc_info.value.structure_type == 'zzzz'
    assert 'zzzz' in str(exc_info.value)

def test_non_ascii_tag():
    with pytest.raises(InvalidStringError):
        Decode(Utf16('a.txt') + b'\xe9loc' + b'blob\x00\x00\x00\x00')

def test_truncated_record():
    encoded = LongRecord('a.txt', 'fwsw', 5)
    with pytest.raises(NotEnoughDataError):
        Decode(encoded[:-1])

def test_dispatch_table_type_codes():
    valid = { b'bool', b'long', b'shor', b'blob', b'type', b'comp', b'dutc', b'ustr' }
    assert len(TAG_DECODERS) == 35
    for tag, (type_code, decoder) in TAG_DECODERS.items():
        assert len(tag) == 4
        assert type_code in valid
        assert callable(decoder)
