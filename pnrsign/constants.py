#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# System constants.
#
# Anything in the packed digest layout below is a contract with the on-chain
# verifier: changing it breaks every signature we have ever issued.
#

# domain separation literal, first thing in the packed digest
DOMAIN_TAG = b'DreamPlayPNR:'

# Polygon mainnet
DEFAULT_CHAIN_ID = 137

# deployed PNR verifier contract
DEFAULT_CONTRACT = '0xcB819189dD53FA65b5b15E979b5D6715752Acef9'

# one day-id bucket per UTC day
SECONDS_PER_DAY = 86400

# expiry window (seconds), client value is clamped into [MIN, MAX]
DEFAULT_EXPIRES_IN = 900
MIN_EXPIRES_IN = 60
MAX_EXPIRES_IN = 3600

# default content id is this prefix plus YYYY-MM-DD (UTC)
CONTENT_ID_PREFIX = 'PNR:'

# EIP-191 "personal message" prefix; length of payload follows in ascii decimal
PERSONAL_MSG_PREFIX = b'\x19Ethereum Signed Message:\n'

# Solidity type names and packed byte widths, in digest order
DIGEST_LAYOUT = [
    ('domain',      'string',   len(DOMAIN_TAG)),
    ('chain_id',    'uint256',  32),
    ('contract',    'address',  20),
    ('user',        'address',  20),
    ('day_id',      'uint32',   4),
    ('video_id',    'bytes32',  32),
    ('expires_at',  'uint64',   8),
]

# total length of packed digest preimage: 129 bytes
DIGEST_PREIMAGE_SIZE = sum(w for _, _, w in DIGEST_LAYOUT)

# sizes (bytes)
PRIVKEY_SIZE = 32
ADDRESS_SIZE = 20
DIGEST_SIZE = 32
SIGNATURE_SIZE = 65

# Ethereum adds this to the recovery id in the last byte of a signature
RECID_OFFSET = 27

# where the HTTP function lives (Netlify path kept for existing clients)
SIGN_ROUTES = [ '/pnr-sign', '/.netlify/functions/pnr-sign' ]

# EOF
