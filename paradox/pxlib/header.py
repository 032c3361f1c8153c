import codecs
import logging

from construct import Enum, Int8ul, Int16sl, Int16ul, Int32ul, Padding, Struct

from .codec import PaddedText
from .exceptions import ConsistencyWarning, UnsupportedFileTypeError, UnsupportedVersionError
from .fields import decode_field_infos, decode_field_names, make_fields, record_width

HEADER_SIZE = 0x58
HEADER_EXTENSION_SIZE = 0x20
BLOCK_UNIT = 0x400

SUPPORTED_VERSIONS = range(0x03, 0x0d)
# headers of these versions carry the extension block
EXTENDED_VERSION = 0x05
# with name pointers, version 7.x tables store a longer table name
LONG_TABLE_NAME_VERSION = 0x0c
TABLE_NAME_SIZE = 79
LONG_TABLE_NAME_SIZE = 261

FALLBACK_ENCODING = "cp437"

FileTypeEnum = Enum(Int8ul,
  db_indexed = 0x00,
  px = 0x01, # primary index
  db_not_indexed = 0x02,
  xnn_non_inc = 0x03,
  ynn = 0x04,
  xnn_inc = 0x05,
  xgn_non_inc = 0x06,
  ygn = 0x07,
  xgn_inc = 0x08
)
SUPPORTED_FILE_TYPES = ("db_indexed", "px", "db_not_indexed", "xnn_non_inc", "ynn", "xnn_inc", "xgn_non_inc", "ygn", "xgn_inc")
# index files without the header extension
SHORT_HEADER_FILE_TYPES = ("px", "ynn", "ygn")

PxFileHeader = Struct(
  "record_size" / Int16sl,
  "header_size" / Int16sl, # data blocks start here
  "file_type" / FileTypeEnum,
  "max_table_size" / Int8ul, # block size in units of 1k
  "num_records" / Int32ul,
  "used_blocks" / Int16ul,
  "file_blocks" / Int16ul,
  "first_block" / Int16ul,
  "last_block" / Int16ul,
  Padding(2),
  "modified_flags1" / Int8ul,
  "index_field_number" / Int8ul,
  "primary_index_workspace" / Int32ul, # in-memory pointer, meaningless on disk
  Padding(4),
  "index_root_block" / Int16ul,
  "index_levels" / Int8ul,
  "num_fields" / Int16sl,
  "primary_key_fields" / Int16sl,
  "encryption1" / Int32ul,
  "sort_order" / Int8ul,
  "modified_flags2" / Int8ul,
  Padding(2),
  "change_count1" / Int8ul,
  "change_count2" / Int8ul,
  Padding(1),
  "table_name_ptr" / Int32ul, # in-memory pointer
  "field_info_ptr" / Int32ul, # in-memory pointer
  "write_protected" / Int8ul,
  "file_version" / Int8ul,
  "max_blocks" / Int16ul,
  Padding(1),
  "aux_passwords" / Int8ul,
  Padding(2),
  "crypt_info_start" / Int32ul,
  "crypt_info_end" / Int32ul,
  Padding(1),
  "auto_inc" / Int32ul,
  Padding(2),
  "index_update_required" / Int8ul,
  Padding(5),
  "ref_integrity" / Int8ul,
  Padding(2)
)

PxHeaderExtension = Struct(
  "file_version_id2" / Int16ul,
  "file_version_id3" / Int16ul,
  "encryption2" / Int32ul,
  "file_update_time" / Int32ul,
  "hi_field_id" / Int16ul,
  "hi_field_id_info" / Int16ul,
  "sometimes_num_fields" / Int16ul,
  "code_page" / Int16ul,
  Padding(4),
  "change_count4" / Int16ul,
  Padding(6)
)

def has_extension(header):
  return header.file_version >= EXTENDED_VERSION and header.file_type not in SHORT_HEADER_FILE_TYPES

def table_name_size(header, name_pointers=False):
  if name_pointers and header.file_version >= LONG_TABLE_NAME_VERSION:
    return LONG_TABLE_NAME_SIZE
  return TABLE_NAME_SIZE

def code_page_encoding(code_page, fallback=FALLBACK_ENCODING):
  if not code_page:
    return fallback
  encoding = "cp{}".format(code_page)
  try:
    codecs.lookup(encoding)
  except LookupError:
    logging.warning("unknown code page %d, decoding text as %s", code_page, fallback)
    return fallback
  return encoding

def warn(header, message, *args):
  message = message % args
  logging.warning(message)
  header.warnings.append(ConsistencyWarning(message))

def validate_header(header):
  if header.file_version not in SUPPORTED_VERSIONS:
    raise UnsupportedVersionError("unknown file version 0x{:02x}".format(header.file_version))
  if header.file_type not in SUPPORTED_FILE_TYPES:
    raise UnsupportedFileTypeError("unknown file type 0x{:02x}".format(int(header.file_type)))
  if header.num_records > 0 and header.first_block != 1:
    warn(header, "num_records > 0 (%d) but first_block != 1 (%d)", header.num_records, header.first_block)
  if not 1 <= header.max_table_size <= 32:
    warn(header, "unusual block size unit %d", header.max_table_size)

def decode_header(cursor, encoding=None, name_pointers=False):
  '''Reads all header sections of a table file.

  The field descriptors are followed by the 79 byte table name and the field
  name table. Tables written with name_pointers have a table name pointer and
  one pointer per field in between, and version 7.x ones a 261 byte name.

  Returns the header container and the list of PxFields. The cursor is left
  behind the field name table. Any error is fatal, nothing half-parsed is
  returned.'''
  cursor.seek(0)
  header = cursor.parse(PxFileHeader)
  header.warnings = []
  validate_header(header)

  header.code_page = 0
  if has_extension(header):
    extension = cursor.parse(PxHeaderExtension)
    for key, value in extension.items():
      if not key.startswith("_"):
        header[key] = value
  header.encoding = encoding or code_page_encoding(header.code_page)
  header.block_size = header.max_table_size * BLOCK_UNIT

  num_fields = max(header.num_fields, 0)
  infos = decode_field_infos(cursor, num_fields)

  if name_pointers:
    cursor.read_block(4 + 4*num_fields)
  header.table_name = cursor.parse(PaddedText(table_name_size(header, name_pointers), header.encoding))
  names = decode_field_names(cursor, num_fields, header.encoding, header.header_size)
  fields = make_fields(infos, names)

  width = record_width(fields)
  if width > header.record_size:
    warn(header, "fields need %d bytes but records are %d bytes wide", width, header.record_size)

  logging.debug("table \"%s\": version 0x%02x, %s, %d fields, %d records",
    header.table_name, header.file_version, header.file_type, len(fields), header.num_records)
  return header, fields
