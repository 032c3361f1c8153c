import io
import logging
import os

from construct import Int8ul, Int16ul, Int32ul, Int64ul, StreamError, Struct, Tell

from .exceptions import OutOfRangeError, TruncatedError

INT_WIDTHS = {
  1: Int8ul,
  2: Int16ul,
  4: Int32ul,
  8: Int64ul
}

class ByteCursor:
  '''Bounds-checked reader over raw bytes or a binary file object.

  All reads either return exactly the requested amount of bytes or raise
  TruncatedError, so callers never have to check lengths themselves.'''
  def __init__(self, source, owned=False):
    if isinstance(source, (bytes, bytearray, memoryview)):
      self.stream = io.BytesIO(bytes(source))
    else:
      self.stream = source
    self.owned = owned
    self.size = self.stream.seek(0, os.SEEK_END)
    self.stream.seek(0)

  @classmethod
  def open(cls, filename):
    logging.debug("opening \"%s\"", filename)
    return cls(open(filename, "rb"), owned=True)

  def __enter__(self):
    return self

  def __exit__(self, *exc):
    self.close()

  def close(self):
    if self.owned:
      self.stream.close()

  def tell(self):
    return self.stream.tell()

  def remaining(self):
    return self.size - self.stream.tell()

  def seek(self, offset):
    if offset < 0 or offset > self.size:
      raise OutOfRangeError("offset {} outside of source (size {})".format(offset, self.size))
    self.stream.seek(offset)

  def read(self, n):
    start = self.stream.tell()
    data = self.stream.read(n)
    if len(data) != n:
      raise TruncatedError("expected {} bytes at offset {}, got {}".format(n, start, len(data)))
    return data

  # same contract as read, named after what the header decoder asks for
  def read_block(self, n):
    return self.read(n)

  def read_int(self, width):
    if width not in INT_WIDTHS:
      raise ValueError("unsupported integer width {}".format(width))
    return self.parse(INT_WIDTHS[width])

  def parse(self, struct):
    start = self.stream.tell()
    try:
      return struct.parse(self.read(struct.sizeof()))
    except StreamError as e:
      raise TruncatedError("{} at offset {}".format(e, start)) from e

  def parse_within(self, subcon, end):
    '''Parses a variable sized subcon which has to end before offset end.'''
    start = self.stream.tell()
    if end < start:
      raise TruncatedError("no room left before offset {} (at {})".format(end, start))
    data = self.read(min(end, self.size) - start)
    try:
      parsed = Struct("value" / subcon, "length" / Tell).parse(data)
    except StreamError as e:
      raise TruncatedError("data at offset {} runs past offset {}: {}".format(start, end, e)) from e
    self.stream.seek(start + parsed.length)
    return parsed.value
