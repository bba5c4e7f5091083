#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Digest builder: ids, expiry clamp, packing and the final hash.
#
import json, pytest

from pnrsign.compat import keccak256
from pnrsign.constants import DEFAULT_CONTRACT, DEFAULT_CHAIN_ID
from pnrsign.digest import SigningRequest, build, pack_fields, clamp_expiry
from pnrsign.digest import day_id_for, default_video_id, pick_day_id
from pnrsign.exceptions import InvalidUser, InvalidRequest
from conftest import USER, JAN15

def test_keccak():
    # keccak, not NIST sha3
    assert keccak256(b'').hex() == \
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    assert keccak256(b'abc').hex() == \
        '4e03657aea45a94fc7d47ba826c8d667c0d1e6e33a64a036ec44f58fa12d6c45'

def test_day_id():
    assert day_id_for(0) == 0
    assert day_id_for(86399) == 0
    assert day_id_for(172800) == 2
    assert day_id_for(JAN15) == 19737

def test_default_video_id():
    assert default_video_id(JAN15) == 'PNR:2024-01-15'
    assert default_video_id(JAN15 + 86399) == 'PNR:2024-01-15'

@pytest.mark.parametrize('val,expect', [
    (10, 60), (9999, 3600), (900, 900), (60, 60), (3600, 3600), (-5, 60),
    (None, 900), (0, 900), ('abc', 900), ('120', 120), (120.9, 120),
    (float('inf'), 3600), (float('-inf'), 60), (float('nan'), 900),
    ('1e3000000', 3600), ('-1e3000000', 60), ('Infinity', 3600), (59.5, 60),
])
def test_clamp(val, expect):
    assert clamp_expiry(val) == expect

def test_defaults():
    bd = build(SigningRequest(user=USER), JAN15)

    assert bd.day_id == 19737
    assert bd.video_id_str == 'PNR:2024-01-15'
    assert bd.video_id_hash == keccak256(b'PNR:2024-01-15')
    assert bd.expires_at == JAN15 + 900
    assert len(bd.digest) == 32

    expect = keccak256(pack_fields(DEFAULT_CHAIN_ID, DEFAULT_CONTRACT, USER,
                                19737, keccak256(b'PNR:2024-01-15'), JAN15 + 900))
    assert bd.digest == expect

def test_pure():
    req = SigningRequest(user=USER, expires_in_sec=300, day_id=5, video_id='clip-7')
    a = build(req, 1_700_000_000)
    b = build(req, 1_700_000_000)
    assert a == b

def test_expiry_bounds():
    now = 1_700_000_000
    for ask in [ -100, 0, 1, 59, 60, 61, 900, 3599, 3600, 3601, 10**9 ]:
        bd = build(SigningRequest(user=USER, expires_in_sec=ask), now)
        assert now + 60 <= bd.expires_at <= now + 3600

def test_video_id():
    bd = build(SigningRequest(user=USER, video_id='ünïcode/🎵'), JAN15)
    assert bd.video_id_str == 'ünïcode/🎵'
    assert bd.video_id_hash == keccak256('ünïcode/🎵'.encode('utf-8'))

    # empty means default
    bd = build(SigningRequest(user=USER, video_id=''), JAN15)
    assert bd.video_id_str == 'PNR:2024-01-15'

    # numbers become text
    bd = build(SigningRequest(user=USER, video_id=42), JAN15)
    assert bd.video_id_str == '42'

def test_day_override():
    assert build(SigningRequest(user=USER, day_id=7), JAN15).day_id == 7
    assert build(SigningRequest(user=USER, day_id='8'), JAN15).day_id == 8
    assert build(SigningRequest(user=USER, day_id=0), JAN15).day_id == 0

    # junk is ignored, server value used
    assert build(SigningRequest(user=USER, day_id='soon'), JAN15).day_id == 19737
    assert build(SigningRequest(user=USER, day_id=True), JAN15).day_id == 19737
    assert build(SigningRequest(user=USER, day_id=1.5), JAN15).day_id == 19737

@pytest.mark.parametrize('bad', [ -1, 1<<32, 1e300, '1e3000000', '-1e3000000',
                                    float('inf'), float('-inf'), 1<<64 ])
def test_day_override_range(bad):
    with pytest.raises(InvalidRequest):
        build(SigningRequest(user=USER, day_id=bad), JAN15)

def test_day_override_policy():
    assert pick_day_id(19737, JAN15, allow_override=False) == 19737
    assert pick_day_id(None, JAN15, allow_override=False) == 19737
    with pytest.raises(InvalidRequest) as ee:
        pick_day_id(19736, JAN15, allow_override=False)
    assert ee.value.kind == 'BAD_REQUEST'

@pytest.mark.parametrize('user', [
    '',
    '0x',
    '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeA',             # short
    '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed00',         # long
    '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAeg',           # not hex
    '0x5aaeb6053F3E94C9b9A09f33669435E7Ef1BeAed',           # bad checksum
    'hello',
])
def test_bad_user(user):
    with pytest.raises(InvalidUser) as ee:
        build(SigningRequest(user=user), JAN15)
    assert ee.value.kind == 'BAD_USER'

@pytest.mark.parametrize('user', [
    '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed',
    '0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed',
    '0x5AAEB6053F3E94C9B9A09F33669435E7EF1BEAED',
])
def test_user_case(user):
    # every accepted spelling of the same address signs the same thing
    ref = build(SigningRequest(user=USER, day_id=1), JAN15).digest
    assert build(SigningRequest(user=user, day_id=1), JAN15).digest == ref

def test_field_sensitivity():
    # flip each field in turn, digest must change every time
    base = dict(chain_id=137, contract=b'\x11'*20, user=b'\x22'*20, day_id=100,
                    video_id_hash=b'\x33'*32, expires_at=1_700_000_900)
    ref = keccak256(pack_fields(**base))

    changes = dict(chain_id=80001, contract=b'\x12'*20, user=b'\x23'*20, day_id=101,
                    video_id_hash=b'\x34'*32, expires_at=1_700_000_901)
    seen = { ref }
    for fld, val in changes.items():
        args = dict(base)
        args[fld] = val
        md = keccak256(pack_fields(**args))
        assert md != ref, fld
        seen.add(md)

    assert len(seen) == 1 + len(changes)

def test_huge_numbers_json():
    # overflowing JSON numbers and giant exponents are clamped, quickly
    body = json.loads('{"user": "%s", "expiresInSec": 1e400}' % USER)
    bd = build(SigningRequest.from_json(body), JAN15)
    assert bd.expires_at == JAN15 + 3600

    bd = build(SigningRequest(user=USER, expires_in_sec='1e3000000'), JAN15)
    assert bd.expires_at == JAN15 + 3600

    with pytest.raises(InvalidRequest):
        build(SigningRequest(user=USER, day_id='1e3000000'), JAN15)

def test_bad_text_video_id():
    with pytest.raises(InvalidRequest) as ee:
        build(SigningRequest(user=USER, video_id='\ud800'), JAN15)
    assert ee.value.kind == 'BAD_REQUEST'

def test_from_json():
    req = SigningRequest.from_json(dict(user=USER, expiresInSec=120, dayId=3, videoId='x'))
    assert req == SigningRequest(USER, 120, 3, 'x')

    req = SigningRequest.from_json({})
    assert req.user == ''

    with pytest.raises(InvalidRequest):
        SigningRequest.from_json([USER])

# EOF
