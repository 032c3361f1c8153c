import logging
from collections import namedtuple

from construct import Array, Enum, Int8ul, Struct

from .codec import CText

FieldTypeEnum = Enum(Int8ul,
  alpha = 0x01,
  date = 0x02,
  short = 0x03,
  long = 0x04,
  currency = 0x05,
  number = 0x06,
  logical = 0x09,
  memo = 0x0c,
  blob = 0x0d,
  fmt_memo = 0x0e, # formatted memo
  ole = 0x0f,
  graphic = 0x10,
  time = 0x14,
  timestamp = 0x15,
  autoinc = 0x16,
  bcd = 0x17,
  bytes = 0x18
)

# values of these types live in the .MB side file
TEXT_BLOB_TYPES = ("memo", "fmt_memo")
BINARY_BLOB_TYPES = ("blob", "ole", "graphic")
BLOB_TYPES = TEXT_BLOB_TYPES + BINARY_BLOB_TYPES

PxFieldInfo = Struct(
  "type" / FieldTypeEnum, # unknown tags parse to plain integers
  "size" / Int8ul
)

PxField = namedtuple("PxField", "name type size offset")

def decode_field_infos(cursor, num_fields):
  if num_fields <= 0:
    return []
  return list(cursor.parse(Array(num_fields, PxFieldInfo)))

def decode_field_names(cursor, num_fields, encoding, end):
  '''Reads num_fields NUL terminated names, all of them before offset end.'''
  if num_fields <= 0:
    return []
  names = []
  for index, name in enumerate(cursor.parse_within(Array(num_fields, CText(encoding)), end)):
    if not name:
      name = "field{}".format(index+1)
      logging.warning("field %d has no name, using \"%s\"", index+1, name)
    names.append(name)
  return names

def make_fields(infos, names):
  fields = []
  offset = 0
  for info, name in zip(infos, names):
    fields.append(PxField(name, info.type, info.size, offset))
    offset += info.size
  return fields

def record_width(fields):
  return sum(field.size for field in fields)
