#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
import struct, time, datetime
from binascii import b2a_hex
from decimal import Decimal, InvalidOperation

# show bytes as hex in a string
B2A = lambda x: b2a_hex(x).decode('ascii')

# same, with the 0x prefix everyone in Ethereum-land expects
HEX0X = lambda x: '0x' + B2A(x)

def from_hex0x(s, size=None):
    # accept hex with or without 0x prefix, optionally require a length
    if s[0:2] in ('0x', '0X'):
        s = s[2:]
    rv = bytes.fromhex(s)
    if size is not None and len(rv) != size:
        raise ValueError(f'Expected {size} bytes of hex, got {len(rv)}')
    return rv

def force_bytes(foo):
    # convert strings to bytes where needed
    return foo.encode('utf-8') if isinstance(foo, str) else foo

def unix_now():
    # whole seconds, like everything on-chain
    return int(time.time())

def ymd_utc(ts):
    # YYYY-MM-DD for a unix time, always UTC
    d = datetime.datetime.fromtimestamp(ts, tz=datetime.timezone.utc)
    return d.strftime('%Y-%m-%d')

# text numbers bigger than this (in magnitude) are read as +/- infinity,
# so nobody gets to make us build a million-digit int
HUGE_EXPONENT = 40

def as_number(val):
    # Lenient numeric read of a JSON value: int, float or numeric text.
    # - returns None for anything else (bools, None, junk, NaN)
    # - infinities come back as float inf, callers clamp or reject them
    if isinstance(val, bool) or val is None:
        return None
    if isinstance(val, int):
        return val
    if isinstance(val, float):
        return val if val == val else None
    if isinstance(val, str):
        val = val.strip()
        if not val:
            return None
        try:
            d = Decimal(val)
        except InvalidOperation:
            return None
        if d.is_nan():
            return None
        if d.is_zero():
            return 0
        if d.is_infinite() or d.adjusted() >= HUGE_EXPONENT:
            return float('-inf') if d < 0 else float('inf')
        if d.adjusted() < 0:
            # magnitude below one, not zero: never integral
            return float(d)
        return int(d) if d == d.to_integral_value() else float(d)
    return None

def is_whole(n):
    # finite and integral (n from as_number)
    if isinstance(n, float):
        return n.is_integer()
    return n is not None

def pack_uint(value, width):
    # big-endian unsigned, exactly width bytes; refuses to truncate
    assert width in (4, 8, 32)
    if not (0 <= value < (1 << (8 * width))):
        raise ValueError(f'Value {value} does not fit in uint{8*width}')
    if width == 4:
        return struct.pack('>I', value)
    if width == 8:
        return struct.pack('>Q', value)
    return value.to_bytes(32, 'big')

# EOF
