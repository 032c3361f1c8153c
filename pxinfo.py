#!/usr/bin/env python3

import argparse
import logging
import os
import sys

from paradox.pxlib.exceptions import PxError
from paradox.pxlib.header import has_extension
from paradox.pxlib.pxdatabase import PxDatabase, find_blob_file

VERSION_NAMES = {
  0x03: "3.0",
  0x04: "3.5",
  0x05: "4.x", 0x06: "4.x", 0x07: "4.x", 0x08: "4.x", 0x09: "4.x",
  0x0a: "5.x", 0x0b: "5.x",
  0x0c: "7.x"
}

FILE_TYPE_NAMES = {
  "db_indexed": "indexed .DB",
  "px": "primary index .PX",
  "db_not_indexed": "non indexed .DB",
  "xnn_non_inc": "non-incrementing secondary index .Xnn",
  "ynn": "secondary index .Ynn (inc/non-inc)",
  "xnn_inc": "incrementing secondary index .Xnn",
  "xgn_non_inc": "non-incrementing secondary index .XGn",
  "ygn": "secondary index .YGn (inc/non-inc)",
  "xgn_inc": "incrementing secondary index .XGn"
}

SORT_ORDER_NAMES = {
  0x00: "ASCII",
  0xb7: "International",
  0x82: "Norwegian/Danish",
  0xe6: "Norwegian/Danish",
  0x0b: "Swedish/Finnish",
  0x5d: "Spanish",
  0x62: "PDX ANSI intl"
}

CODE_PAGE_NAMES = {
  0x01b5: "United States",
  0x04e4: "Spain"
}

FIELD_TYPE_NAMES = {
  "alpha": "Alpha",
  "date": "Date",
  "short": "Short Integer",
  "long": "Long Integer",
  "currency": "Currency",
  "number": "Number",
  "logical": "Logical",
  "memo": "Memo BLOB",
  "blob": "BLOB",
  "fmt_memo": "Formatted Memo",
  "ole": "OLE",
  "graphic": "Graphic",
  "time": "Time",
  "timestamp": "Timestamp",
  "autoinc": "Incremental",
  "bcd": "BCD",
  "bytes": "Bytes"
}

def print_header(header):
  print("File-Version: {} | {:02x}".format(VERSION_NAMES.get(header.file_version, "Unknown"), header.file_version))
  print("Filetype: {}".format(FILE_TYPE_NAMES.get(header.file_type, "Unknown")))
  print("Tablename: {}".format(header.table_name))
  print("Sort-Order: {}".format(SORT_ORDER_NAMES.get(header.sort_order, "Unknown")))
  print("Write-Protection: {}".format({0: "off", 1: "on"}.get(header.write_protected, "Unknown")))
  if has_extension(header):
    print("Codepage: {} ({})".format(CODE_PAGE_NAMES.get(header.code_page, "Unknown"), header.encoding))
  print("Number of Blocks: {}".format(header.file_blocks))
  print("Used Blocks: {}".format(header.used_blocks))
  print("First Block: {}".format(header.first_block))
  print("Number of Records: {}".format(header.num_records))
  print("Max. Tablesize: {}".format(header.max_table_size))
  print("Recordsize: {}".format(header.record_size))
  print("Number of fields: {}".format(header.num_fields))
  if header.file_type == "px":
    print("Index-root: {}".format(header.index_root_block))
    print("Index-levels: {}".format(header.index_levels))

def print_fields(fields):
  for field in fields:
    print("Name: {:<20}Type: {:<15}Size: {}".format(field.name, FIELD_TYPE_NAMES.get(field.type, "Unknown"), field.size))

def print_records(db, limit, logical):
  for count, record in enumerate(db.records(logical)):
    if limit is not None and count >= limit:
      break
    s = ""
    for label, content in record.values.items():
      s += "{}: \"{}\" ".format(label, content)
    for label, error in record.errors.items():
      s += "{}: <{}> ".format(label, error)
    print("{:5d} {}".format(count+1, s))

def main(argv=None):
  parser = argparse.ArgumentParser(description='Displays header information of a Paradox database file')
  parser.add_argument('-f', '--filename', required=True, help='Table file (.DB, .PX, .Xnn, ...)')
  parser.add_argument('-b', '--blob', dest='blob_filename', default=None, help='Blob side file, defaults to the .MB file next to the table')
  parser.add_argument('-r', '--records', action='store_true', help='Also print the records')
  parser.add_argument('-n', '--limit', type=int, default=None, help='Print at most this many records')
  parser.add_argument('--logical', action='store_true', help='Print records in block chain order')
  parser.add_argument('-e', '--encoding', default=None, help='Text encoding, overrides the code page of the table')
  parser.add_argument('-p', '--name-pointers', action='store_true', help='Header has a pointer area before the table name (261 byte names for 7.x)')
  parser.add_argument('-q', '--quiet', action='store_const', dest='loglevel', const=logging.ERROR, help='Only display errors', default=logging.WARNING)
  parser.add_argument('-d', '--debug', action='store_const', dest='loglevel', const=logging.DEBUG, help='Display verbose debugging information')
  args = parser.parse_args(argv)

  logging.basicConfig(level=args.loglevel, format='%(levelname)-7s %(module)s: %(message)s')

  if not os.path.isfile(args.filename):
    logging.error("File '%s' does not exist", args.filename)
    return 1
  blob_filename = args.blob_filename or find_blob_file(args.filename)

  try:
    with PxDatabase(encoding=args.encoding, name_pointers=args.name_pointers) as db:
      db.load_file(args.filename, blob_filename)
      print_header(db.header)
      print()
      print_fields(db.fields)
      if args.records:
        print()
        print_records(db, args.limit, args.logical)
  except PxError as e:
    logging.error("Failed to decode \"%s\": %s", args.filename, e)
    return 2
  except OSError as e:
    logging.error("Failed to read \"%s\": %s", args.filename, e)
    return 1
  return 0

if __name__ == "__main__":
  sys.exit(main())
