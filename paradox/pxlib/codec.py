# Paradox stores every ordered scalar "sign biased": the sign bit of the
# big-endian value is inverted, so comparing the raw bytes unsigned gives the
# same order as comparing the values. An all-zero field is NULL (None).

from collections import namedtuple
from datetime import date, datetime, time, timedelta

from construct import Adapter, Bytes, FixedSized, Float64b, GreedyBytes, NullTerminated

# day number of 1970-01-01, counted from 0000-01-01 (proleptic gregorian)
JULIAN_OFFSET = 719528
# paradox day 1 is 0001-01-01, which is day 366 of the count above
DAYS_IN_YEAR_ZERO = 366
# seconds from timestamp day 0 (0000-12-31) to 1970-01-01
TIMESTAMP_EPOCH_OFFSET = 62135683200
TIMESTAMP_TICKS_PER_SECOND = 500

UNIX_EPOCH = datetime(1970, 1, 1)

# value kind for fields without value semantics, keeps the raw bytes around
Unsupported = namedtuple("Unsupported", "type data")

def is_null(data):
  return not any(data)

def decode_int(data):
  if is_null(data):
    return None
  value = int.from_bytes(data, "big")
  sign = 1 << (8*len(data)-1)
  if value & sign:
    return value & ~sign
  # set the sign bit and read two's complement
  return (value | sign) - (sign << 1)

def encode_int(value, width):
  if value is None:
    return bytes(width)
  sign = 1 << (8*width-1)
  if value >= 0:
    return (value | sign).to_bytes(width, "big")
  return ((value + (sign << 1)) & ~sign).to_bytes(width, "big")

def decode_float(data):
  if is_null(data):
    return None
  if data[0] & 0x80:
    return Float64b.parse(bytes([data[0] & 0x7f]) + bytes(data[1:]))
  return Float64b.parse(bytes(b ^ 0xff for b in data))

def encode_float(value):
  if value is None:
    return bytes(8)
  data = Float64b.build(value)
  if value >= 0:
    return bytes([data[0] | 0x80]) + data[1:]
  return bytes(b ^ 0xff for b in data)

def civil_from_days(days):
  '''Converts days since 1970-01-01 to a proleptic gregorian (y, m, d).'''
  z = days + 719468 # shift epoch to 0000-03-01
  era = z // 146097
  doe = z - era * 146097
  yoe = (doe - doe//1460 + doe//36524 - doe//146096) // 365
  doy = doe - (365*yoe + yoe//4 - yoe//100)
  mp = (5*doy + 2) // 153
  day = doy - (153*mp + 2)//5 + 1
  month = mp + 3 if mp < 10 else mp - 9
  year = yoe + era*400 + (1 if month <= 2 else 0)
  return year, month, day

def days_to_date(value):
  return date(*civil_from_days(value + DAYS_IN_YEAR_ZERO - 1 - JULIAN_OFFSET))

def millis_to_time(value):
  value //= 1000 # drop milliseconds
  second = value % 60
  value //= 60
  minute = value % 60
  hour = value // 60
  return time(hour, minute, second)

def ticks_to_datetime(value):
  seconds = (value >> 8) // TIMESTAMP_TICKS_PER_SECOND
  return UNIX_EPOCH + timedelta(seconds=seconds - TIMESTAMP_EPOCH_OFFSET)

def datetime_to_ticks(moment):
  seconds = int((moment - UNIX_EPOCH).total_seconds()) + TIMESTAMP_EPOCH_OFFSET
  return (seconds * TIMESTAMP_TICKS_PER_SECOND) << 8

class SignBiasedAdapter(Adapter):
  '''Sign biased integer, optionally mapped to another type.'''
  def __init__(self, subcon, decoder=None, encoder=None):
    self.decoder = decoder
    self.encoder = encoder
    super().__init__(subcon)
  def _decode(self, obj, context, path):
    value = decode_int(obj)
    if value is None or self.decoder is None:
      return value
    return self.decoder(value)
  def _encode(self, obj, context, path):
    if obj is not None and self.encoder is not None:
      obj = self.encoder(obj)
    return encode_int(obj, self.subcon.sizeof())

class SignBiasedFloatAdapter(Adapter):
  def _decode(self, obj, context, path):
    return decode_float(obj)
  def _encode(self, obj, context, path):
    return encode_float(obj)

class TextAdapter(Adapter):
  def __init__(self, subcon, encoding):
    self.encoding = encoding
    super().__init__(subcon)
  def _decode(self, obj, context, path):
    return obj.decode(self.encoding, errors="replace")
  def _encode(self, obj, context, path):
    return obj.encode(self.encoding)

PxLogical = SignBiasedAdapter(Bytes(1), bool, int)
PxShort = SignBiasedAdapter(Bytes(2))
PxLong = SignBiasedAdapter(Bytes(4))
PxFloat = SignBiasedFloatAdapter(Bytes(8))
PxDate = SignBiasedAdapter(Bytes(4), days_to_date, lambda d: d.toordinal())
PxTime = SignBiasedAdapter(Bytes(4), millis_to_time,
  lambda t: ((t.hour*60 + t.minute)*60 + t.second)*1000 + t.microsecond//1000)
PxTimestamp = SignBiasedAdapter(Bytes(8), ticks_to_datetime, datetime_to_ticks)

# NUL terminated text inside a fixed size, NUL padded region
def PaddedText(size, encoding):
  return FixedSized(size, TextAdapter(NullTerminated(GreedyBytes, require=False), encoding))

def CText(encoding):
  return TextAdapter(NullTerminated(GreedyBytes), encoding)

def decode_alpha(data, encoding):
  return PaddedText(len(data), encoding).parse(bytes(data)) or None

FIELD_VALUES = {
  "logical": PxLogical,
  "short": PxShort,
  "long": PxLong,
  "autoinc": PxLong,
  "currency": PxFloat,
  "number": PxFloat,
  "date": PxDate,
  "time": PxTime,
  "timestamp": PxTimestamp
}

def decode_value(field_type, data, encoding="cp437"):
  if field_type == "alpha":
    return decode_alpha(data, encoding)
  if field_type not in FIELD_VALUES:
    return Unsupported(field_type, bytes(data))
  value = FIELD_VALUES[field_type]
  if len(data) != value.sizeof():
    raise ValueError("{} field must be {} bytes wide, got {}".format(field_type, value.sizeof(), len(data)))
  return value.parse(bytes(data))
