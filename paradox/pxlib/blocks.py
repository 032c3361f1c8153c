import logging
from collections import namedtuple

from construct import Int16sl, Int16ul, Struct

from .exceptions import CorruptTableError

PxDataBlockHeader = Struct(
  "next_block" / Int16ul, # 0 terminates the chain
  "prev_block" / Int16ul,
  "add_data_size" / Int16sl # offset of the last record in this block, negative if empty
)
BLOCK_HEADER_SIZE = PxDataBlockHeader.sizeof()

PxBlock = namedtuple("PxBlock", "number next_block prev_block num_records records")

def parse_block(number, data, record_size):
  head = PxDataBlockHeader.parse(data[:BLOCK_HEADER_SIZE])
  slots = (len(data) - BLOCK_HEADER_SIZE) // record_size if record_size > 0 else 0
  if head.add_data_size < 0 or record_size <= 0:
    num_records = 0
  else:
    num_records = head.add_data_size // record_size + 1
  if num_records > slots:
    logging.warning("block %d claims %d records but only %d fit", number, num_records, slots)
    num_records = slots
  records = [data[BLOCK_HEADER_SIZE+i*record_size:BLOCK_HEADER_SIZE+(i+1)*record_size] for i in range(num_records)]
  return PxBlock(number, head.next_block, head.prev_block, num_records, records)

class BlockWalker:
  '''Iterates the data blocks of a table in physical order.

  Every iteration starts again at the first block, a trailing partial block
  is dropped.'''
  def __init__(self, cursor, header):
    self.cursor = cursor
    self.data_offset = header.header_size
    self.block_size = header.block_size
    self.record_size = header.record_size
    if self.block_size <= BLOCK_HEADER_SIZE:
      raise CorruptTableError("invalid block size {}".format(self.block_size))

  def __len__(self):
    return max(self.cursor.size - self.data_offset, 0) // self.block_size

  def __iter__(self):
    for index in range(len(self)):
      yield self.read_block(index+1)

  def block_offset(self, number):
    return self.data_offset + (number-1) * self.block_size

  def read_block(self, number):
    if not 1 <= number <= len(self):
      raise CorruptTableError("block {} outside of table ({} blocks)".format(number, len(self)))
    self.cursor.seek(self.block_offset(number))
    return parse_block(number, self.cursor.read_block(self.block_size), self.record_size)

  def walk_chain(self, first_block):
    '''Follows the next_block pointers starting at first_block.'''
    seen = set()
    number = first_block
    while number != 0:
      if number in seen:
        raise CorruptTableError("block chain loops back to block {}".format(number))
      seen.add(number)
      block = self.read_block(number)
      yield block
      number = block.next_block
