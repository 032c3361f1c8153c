class PxError(Exception):
  pass

# source ended before a fixed region was read completely
class TruncatedError(PxError):
  pass

class OutOfRangeError(PxError):
  pass

class UnsupportedVersionError(PxError):
  pass

class UnsupportedFileTypeError(PxError):
  pass

# block chain points outside the file or loops
class CorruptTableError(PxError):
  pass

# errors of a single blob field, the rest of the record stays usable
class PxBlobError(PxError):
  pass

class BlobTypeMismatchError(PxBlobError):
  pass

class BlobLengthMismatchError(PxBlobError):
  pass

class ConsistencyWarning(UserWarning):
  pass
