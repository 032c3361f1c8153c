import logging
import os

from .blocks import BlockWalker
from .cursor import ByteCursor
from .header import decode_header
from .record import decode_record

BLOB_FILE_SUFFIXES = (".MB", ".mb")

def find_blob_file(filename):
  '''Returns the path of the .MB side file next to filename, or None.'''
  base = os.path.splitext(filename)[0]
  for suffix in BLOB_FILE_SUFFIXES:
    if os.path.isfile(base+suffix):
      return base+suffix
  return None

class PxDatabase:
  def __init__(self, encoding=None, name_pointers=False):
    self.encoding = encoding # overrides the code page of the table
    self.name_pointers = name_pointers # header stores name pointers, see decode_header
    self.cursor = None
    self.blob_cursor = None
    self.header = None
    self.fields = []
    self.walker = None

  def __enter__(self):
    return self

  def __exit__(self, *exc):
    self.close()

  def close(self):
    for cursor in (self.cursor, self.blob_cursor):
      if cursor is not None:
        cursor.close()
    self.cursor = None
    self.blob_cursor = None

  def get_field(self, name):
    for field in self.fields:
      if field.name == name:
        return field
    raise KeyError("PxDatabase: field {} not found".format(name))

  def _load(self, cursor, blob_cursor):
    self.cursor = cursor
    self.blob_cursor = blob_cursor
    try:
      self.header, self.fields = decode_header(self.cursor, self.encoding, self.name_pointers)
      self.walker = BlockWalker(self.cursor, self.header)
    except Exception:
      self.close()
      raise
    logging.info("Loaded table \"%s\": %d fields, %d blocks, %d records",
      self.header.table_name, len(self.fields), len(self.walker), self.header.num_records)

  def load_file(self, filename, blob_filename=None):
    logging.info("Loading table \"%s\"", filename)
    cursor = ByteCursor.open(filename)
    blob_cursor = None
    if blob_filename is not None:
      logging.debug("using blob file \"%s\"", blob_filename)
      try:
        blob_cursor = ByteCursor.open(blob_filename)
      except OSError:
        cursor.close()
        raise
    self._load(cursor, blob_cursor)

  def load_buffer(self, data, blob_data=None):
    logging.debug("Loading table from buffer")
    blob_cursor = ByteCursor(blob_data) if blob_data is not None else None
    self._load(ByteCursor(data), blob_cursor)

  def blocks(self, logical=False):
    if logical:
      if self.header.num_records == 0:
        return iter([])
      return self.walker.walk_chain(self.header.first_block)
    return iter(self.walker)

  def records(self, logical=False):
    count = 0
    for block in self.blocks(logical):
      for index, raw in enumerate(block.records):
        count += 1
        yield decode_record(raw, self.fields, self.header.encoding, self.blob_cursor, block.number, index)
    if count != self.header.num_records:
      logging.warning("found %d records, header announces %d", count, self.header.num_records)
