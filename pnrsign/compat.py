#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Wrappers for crypto libraries. AKA API Cleanup
#
# My standards:
# - private key: 32 bytes
# - pubkeys: 65 bytes, always uncompressed (Ethereum hashes the X||Y part)
# - signature: 65 bytes, r || s || v, with v = 27 + rec_id (Ethereum style)
# - addresses: 20 bytes internally, EIP-55 checksum text at the edges
# - message digests (for sig/recover) are already digested
# - recover/verify on garbage raises ValueError, never anything else
#
# - curve math is libsecp256k1 underneath (via coincurve), keccak via eth-hash
#
from coincurve import PrivateKey, PublicKey
from eth_utils import keccak, to_checksum_address, to_canonical_address
from .constants import RECID_OFFSET, SIGNATURE_SIZE, PRIVKEY_SIZE

__all__ = [ 'keccak256', 'pubkey_to_address', 'render_address', 'address_bytes',
            'CT_sign', 'CT_sig_to_pubkey', 'CT_pick_keypair', 'CT_priv_to_pubkey' ]

def keccak256(msg):
    # single-shot keccak (NOT sha3-256, the padding differs)
    return keccak(msg)

def pubkey_to_address(pubkey):
    # last 20 bytes of keccak over the 64-byte X||Y point
    if len(pubkey) == 33:
        pubkey = PublicKey(pubkey).format(compressed=False)
    assert len(pubkey) == 65 and pubkey[0] == 0x04, 'expecting uncompressed pubkey'
    return keccak256(pubkey[1:])[-20:]

def render_address(addr):
    # 20 bytes (or any valid hex form) => EIP-55 mixed case text
    if isinstance(addr, (bytes, bytearray)):
        assert len(addr) == 20
        addr = '0x' + bytes(addr).hex()
    return to_checksum_address(addr)

def address_bytes(addr):
    # text address => 20 bytes (no validation beyond what eth-utils does)
    return to_canonical_address(addr)

def CT_pick_keypair():
    # Choose pub/private pair, return private key (32 bytes) and uncompressed pubkey
    # - coincurve pulls randomness from os.urandom
    pk = PrivateKey()
    return pk.secret, pk.public_key.format(compressed=False)

def CT_priv_to_pubkey(priv):
    assert len(priv) == PRIVKEY_SIZE
    return PrivateKey(priv).public_key.format(compressed=False)

def CT_sign(privkey, msg_digest):
    # RFC6979 deterministic nonce, low-S; returns 65 bytes r||s||v
    assert len(msg_digest) == 32
    sig = PrivateKey(privkey).sign_recoverable(msg_digest, hasher=None)
    assert len(sig) == SIGNATURE_SIZE
    return sig[0:64] + bytes([sig[64] + RECID_OFFSET])

def CT_sig_to_pubkey(msg_digest, sig):
    # returns a pubkey (65 bytes)
    if len(sig) != SIGNATURE_SIZE:
        raise ValueError(f'Signature must be {SIGNATURE_SIZE} bytes, got {len(sig)}')

    rec_id = sig[64]
    if rec_id >= RECID_OFFSET:
        rec_id -= RECID_OFFSET       # 27/28 => 0/1; raw 0/1 also accepted
    if rec_id not in (0, 1):
        raise ValueError(f'Bad recovery id in signature: {sig[64]}')

    sig2 = sig[0:64] + bytes([rec_id])
    pub = PublicKey.from_signature_and_message(sig2, msg_digest, hasher=None)
    return pub.format(compressed=False)

# EOF
