# helpers to assemble synthetic Paradox tables for the tests
from datetime import time

from paradox.pxlib.blob import PxBlobBlockHeader, PxBlobPointer
from paradox.pxlib.blocks import BLOCK_HEADER_SIZE, PxDataBlockHeader
from paradox.pxlib.codec import PaddedText, PxDate, PxTime, PxTimestamp, encode_float, encode_int
from paradox.pxlib.fields import PxFieldInfo
from paradox.pxlib.header import BLOCK_UNIT, FileTypeEnum, PxFileHeader, PxHeaderExtension, has_extension, table_name_size

HEADER_NAMES = [sc.name for sc in PxFileHeader.subcons if sc.name]
EXTENSION_NAMES = [sc.name for sc in PxHeaderExtension.subcons if sc.name]


class Attrs(dict):
    __getattr__ = dict.__getitem__


def encode_date(day):
    return PxDate.build(day)


def encode_time(hour, minute, second, millis=0):
    return PxTime.build(time(hour, minute, second, millis*1000))


def encode_timestamp(moment):
    return PxTimestamp.build(moment)


def encode_alpha(text, size, encoding="cp1252"):
    return PaddedText(size, encoding).build(text)


def blob_pointer(offset, length, index=0xff, mod_number=1, size=10, inline=b""):
    trailer = PxBlobPointer.build(dict(raw_offset=offset | index, length=length, mod_number=mod_number))
    return inline.ljust(size-10, b"\x00") + trailer


def blob_block(payload, length=None, block_type=2):
    head = PxBlobBlockHeader.build(dict(
        type=block_type, size_div_4k=1, mod_number=1,
        length=len(payload) if length is None else length))
    return head + payload


def build_header(**kwargs):
    values = dict.fromkeys(HEADER_NAMES, 0)
    values.update(file_type="db_indexed", file_version=0x0c, max_table_size=1)
    values.update((k, v) for k, v in kwargs.items() if k in HEADER_NAMES)
    return PxFileHeader.build(values)


def build_extension(**kwargs):
    values = dict.fromkeys(EXTENSION_NAMES, 0)
    values.update(code_page=0x04e4)
    values.update((k, v) for k, v in kwargs.items() if k in EXTENSION_NAMES)
    return PxHeaderExtension.build(values)


def build_table(fields, records=(), table_name="test", file_type="db_indexed",
                file_version=0x0c, max_table_size=1, code_page=0x04e4,
                record_size=None, num_records=None, blocks=None, name_pointers=False, **kwargs):
    '''fields is a list of (name, type, size), records a list of raw records.

    blocks optionally lists the records of every block instead of packing
    them, use None for an empty block. With name_pointers the header gets the
    pointer area in front of the table name.'''
    if record_size is None:
        record_size = sum(size for _, _, size in fields) or 1
    block_size = max_table_size*BLOCK_UNIT
    if blocks is None:
        per_block = (block_size - BLOCK_HEADER_SIZE) // record_size
        records = list(records)
        blocks = [records[i:i+per_block] for i in range(0, len(records), per_block)]
    if num_records is None:
        num_records = sum(len(b) for b in blocks if b)

    # normalize integer tags so has_extension sees the enum names
    kind = Attrs(file_type=FileTypeEnum.parse(FileTypeEnum.build(file_type)), file_version=file_version)
    sections = b"".join(PxFieldInfo.build(dict(type=t, size=s)) for _, t, s in fields)
    if name_pointers:
        sections += b"\x00" * (4 + 4*len(fields))
    sections += encode_alpha(table_name, table_name_size(kind, name_pointers))
    sections += b"".join(name.encode("cp1252") + b"\x00" for name, _, _ in fields)
    if has_extension(kind):
        sections = build_extension(code_page=code_page, **kwargs) + sections
    header_size = -(-(0x58 + len(sections)) // 0x100) * 0x100

    head = dict(
        record_size=record_size, header_size=header_size, file_type=file_type,
        file_version=file_version, max_table_size=max_table_size,
        num_records=num_records, num_fields=len(fields),
        file_blocks=len(blocks), used_blocks=len(blocks),
        first_block=1 if blocks else 0, last_block=len(blocks))
    head.update(kwargs)
    data = (build_header(**head) + sections).ljust(header_size, b"\x00")

    for i, block in enumerate(blocks):
        add_data_size = (len(block)-1)*record_size if block else -record_size
        body = PxDataBlockHeader.build(dict(
            next_block=i+2 if i+1 < len(blocks) else 0,
            prev_block=i, add_data_size=add_data_size))
        body += b"".join(block or [])
        data += body.ljust(block_size, b"\x00")
    return data
