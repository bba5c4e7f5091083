#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# digest.py
#
# Build the exact bytes the PNR contract hashes:
#
#   keccak256(abi.encodePacked("DreamPlayPNR:", chainid, contract,
#                               user, dayId, videoId, expiresAt))
#
# Nothing in here knows about keys, HTTP or the environment.
#
from collections import namedtuple
from dataclasses import dataclass
from eth_utils import is_address

from .constants import *
from .compat import keccak256, address_bytes
from .exceptions import InvalidUser, InvalidRequest
from .utils import as_number, is_whole, ymd_utc, pack_uint

# what build() figured out; digest is the 32 bytes to be signed
BuiltDigest = namedtuple('BuiltDigest', 'day_id video_id_str video_id_hash expires_at digest')

@dataclass(frozen=True)
class SigningRequest:
    # As received from the client; values are raw JSON and checked in build()
    user: str
    expires_in_sec: object = None
    day_id: object = None
    video_id: object = None

    @classmethod
    def from_json(cls, body):
        # body is the decoded JSON object posted by the web client
        if not isinstance(body, dict):
            raise InvalidRequest('Request body must be a JSON object')

        user = body.get('user') or ''
        if not isinstance(user, str):
            user = str(user)

        return cls(user=user,
                    expires_in_sec=body.get('expiresInSec'),
                    day_id=body.get('dayId'),
                    video_id=body.get('videoId'))

def day_id_for(now):
    return now // SECONDS_PER_DAY

def default_video_id(now):
    # deterministic per UTC day, eg. "PNR:2024-01-15"
    return CONTENT_ID_PREFIX + ymd_utc(now)

def clamp_expiry(expires_in_sec):
    # missing, zero or junk => default, then forced into [60, 3600]
    # - clamp first (handles +/-inf), truncate after
    n = as_number(expires_in_sec)
    if not n:
        n = DEFAULT_EXPIRES_IN
    return int(max(MIN_EXPIRES_IN, min(n, MAX_EXPIRES_IN)))

def check_user(user):
    # return 20 bytes, or raise InvalidUser
    # - checksummed (mixed case) must be correct, all-lower/all-upper is fine
    if not isinstance(user, str) or not is_address(user):
        raise InvalidUser('Not a valid 20-byte address')
    return address_bytes(user)

def pick_day_id(req_day_id, now, allow_override=True):
    computed = day_id_for(now)

    if req_day_id is None:
        return computed

    override = as_number(req_day_id)
    if override is None or (not is_whole(override) and abs(override) != float('inf')):
        # not numeric, or a fraction: ignore it, use ours
        return computed

    if not (0 <= override < (1 << 32)):
        raise InvalidRequest('dayId out of range')
    override = int(override)

    if not allow_override and override != computed:
        raise InvalidRequest('dayId override not permitted')

    return override

def pick_video_id(req_video_id, now):
    if not req_video_id:
        return default_video_id(now)
    if not isinstance(req_video_id, str):
        req_video_id = str(req_video_id)
    return req_video_id

def pack_fields(chain_id, contract, user, day_id, video_id_hash, expires_at):
    # Solidity abi.encodePacked() for our fixed list of types.
    # - no length prefixes, no padding except the uint256
    # - see DIGEST_LAYOUT for names, types and widths
    contract = contract if isinstance(contract, bytes) else address_bytes(contract)
    user = user if isinstance(user, bytes) else address_bytes(user)

    assert len(contract) == ADDRESS_SIZE
    assert len(user) == ADDRESS_SIZE
    assert len(video_id_hash) == 32

    rv = b''.join([
        DOMAIN_TAG,
        pack_uint(chain_id, 32),
        contract,
        user,
        pack_uint(day_id, 4),
        video_id_hash,
        pack_uint(expires_at, 8),
    ])
    assert len(rv) == DIGEST_PREIMAGE_SIZE

    return rv

def build(request, now, chain_id=DEFAULT_CHAIN_ID, contract=DEFAULT_CONTRACT,
                allow_day_override=True):
    # Derive identifiers and the digest for one request at time "now".
    # - pure: same inputs, same answer
    user = check_user(request.user)

    day_id = pick_day_id(request.day_id, now, allow_override=allow_day_override)
    video_id_str = pick_video_id(request.video_id, now)
    try:
        video_id_hash = keccak256(video_id_str.encode('utf-8'))
    except UnicodeEncodeError:
        # lone surrogates and such
        raise InvalidRequest('videoId is not valid text') from None
    expires_at = now + clamp_expiry(request.expires_in_sec)

    preimage = pack_fields(chain_id, contract, user, day_id, video_id_hash, expires_at)

    return BuiltDigest(day_id, video_id_str, video_id_hash, expires_at, keccak256(preimage))

# EOF
