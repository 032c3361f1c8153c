import logging
from collections import namedtuple

from construct import Computed, Int8ul, Int16ul, Int32ul, Struct, this

from .exceptions import BlobLengthMismatchError, BlobTypeMismatchError

BLOB_POINTER_SIZE = 10
BLOB_INDEX_NULL = 0x00
BLOB_INDEX_SINGLE = 0xff # payload has a type 2 block of its own
BLOB_BLOCK_TYPE_SINGLE = 0x02

# trailing 10 bytes of every blob field
PxBlobPointer = Struct(
  "raw_offset" / Int32ul,
  "length" / Int32ul,
  "mod_number" / Int16ul,
  "index" / Computed(this.raw_offset & 0xff), # shares the low offset byte
  "offset" / Computed(this.raw_offset & 0xffffff00) # blocks are 256 byte aligned
)

PxBlobBlockHeader = Struct(
  "type" / Int8ul,
  "size_div_4k" / Int16ul,
  "length" / Int32ul,
  "mod_number" / Int16ul
)

# blob payload which could not be fetched because no side file is attached
BlobRef = namedtuple("BlobRef", "index offset length mod_number")
# payload is a sub record of a shared type 3 block, which is not decoded
Unresolved = namedtuple("Unresolved", "index offset length mod_number")

def parse_blob_pointer(data):
  if len(data) < BLOB_POINTER_SIZE:
    return None
  return PxBlobPointer.parse(bytes(data[-BLOB_POINTER_SIZE:]))

def read_single_blob(blob_cursor, pointer):
  blob_cursor.seek(pointer.offset)
  block = blob_cursor.parse(PxBlobBlockHeader)
  if block.type != BLOB_BLOCK_TYPE_SINGLE:
    raise BlobTypeMismatchError("blob block at 0x{:x} has type {}, expected {}".format(
      pointer.offset, block.type, BLOB_BLOCK_TYPE_SINGLE))
  if block.length != pointer.length:
    raise BlobLengthMismatchError("blob block at 0x{:x} holds {} bytes, field expects {}".format(
      pointer.offset, block.length, pointer.length))
  return blob_cursor.read(block.length)

def resolve_blob(data, blob_cursor, encoding=None):
  '''Fetches the value of a memo/blob field from the side file.

  Returns None for NULL, the payload (str if an encoding is given, bytes
  otherwise), a BlobRef if blob_cursor is None, or Unresolved for payloads
  stored in shared blocks.'''
  pointer = parse_blob_pointer(data)
  if pointer is None or pointer.index == BLOB_INDEX_NULL:
    return None
  ref = (pointer.index, pointer.offset, pointer.length, pointer.mod_number)
  if pointer.index != BLOB_INDEX_SINGLE:
    logging.debug("blob at 0x%x is sub record %d of a shared block", pointer.offset, pointer.index)
    return Unresolved(*ref)
  if blob_cursor is None:
    return BlobRef(*ref)
  payload = read_single_blob(blob_cursor, pointer)
  if encoding is not None:
    return payload.decode(encoding, errors="replace")
  return payload
