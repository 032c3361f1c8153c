import logging
from collections import namedtuple

from construct import Container

from .blob import resolve_blob
from .codec import decode_value
from .exceptions import OutOfRangeError, PxBlobError, TruncatedError
from .fields import BLOB_TYPES, TEXT_BLOB_TYPES

# values holds the decoded fields in table order, errors the fields which failed
PxRecord = namedtuple("PxRecord", "block index values errors")

FIELD_ERRORS = (PxBlobError, TruncatedError, OutOfRangeError, ValueError, OverflowError)

def decode_field(field, data, encoding, blob_cursor=None):
  if field.type in BLOB_TYPES:
    text_encoding = encoding if field.type in TEXT_BLOB_TYPES else None
    return resolve_blob(data, blob_cursor, text_encoding)
  return decode_value(field.type, data, encoding)

def decode_record(raw, fields, encoding, blob_cursor=None, block=0, index=0):
  values = Container()
  errors = {}
  for field in fields:
    data = raw[field.offset:field.offset+field.size]
    try:
      if len(data) != field.size:
        raise TruncatedError("record is too short for field \"{}\"".format(field.name))
      values[field.name] = decode_field(field, data, encoding, blob_cursor)
    except FIELD_ERRORS as e:
      logging.warning("block %d record %d: field \"%s\" not decoded: %s", block, index, field.name, e)
      errors[field.name] = e
  return PxRecord(block, index, values, errors)
