#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# signer.py
#
# Sign a 32-byte digest the way ethers' Wallet.signMessage(bytes) does, so
# the contract can ecrecover() it after applying the same prefix:
#
#   keccak256("\x19Ethereum Signed Message:\n32" || digest)
#
from collections import namedtuple

from .constants import PERSONAL_MSG_PREFIX, PRIVKEY_SIZE, DIGEST_SIZE
from .compat import keccak256, pubkey_to_address, render_address
from .compat import CT_sign, CT_sig_to_pubkey, CT_priv_to_pubkey, CT_pick_keypair
from .exceptions import SigningUnavailable
from .utils import from_hex0x

SignedDigest = namedtuple('SignedDigest', 'signature signer')

class SigningIdentity:
    #
    # The operator's key. Build once at startup, then pass it around.
    #
    # - immutable after construction
    # - repr/str only ever show the address
    #
    __slots__ = ('_privkey', 'address')

    def __init__(self, privkey):
        if not isinstance(privkey, (bytes, bytearray)) or len(privkey) != PRIVKEY_SIZE:
            raise SigningUnavailable('Operator key must be 32 bytes')
        try:
            pubkey = CT_priv_to_pubkey(bytes(privkey))
        except ValueError:
            # zero, or not below curve order
            raise SigningUnavailable('Operator key is not a valid secp256k1 secret') from None

        object.__setattr__(self, '_privkey', bytes(privkey))
        object.__setattr__(self, 'address', render_address(pubkey_to_address(pubkey)))

    def __setattr__(self, name, value):
        raise AttributeError('SigningIdentity is read-only')

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.address)

    __str__ = __repr__

    def __reduce__(self):
        # no pickling a private key into somebody's cache
        raise TypeError('SigningIdentity cannot be serialized')

    @classmethod
    def from_hex(cls, text):
        # 64 hex digits, 0x prefix optional
        if not text:
            raise SigningUnavailable('No operator key configured')
        try:
            raw = from_hex0x(text.strip(), PRIVKEY_SIZE)
        except ValueError:
            # don't echo the value, it might be most of a real key
            raise SigningUnavailable('Operator key is not 32 bytes of hex') from None
        return cls(raw)

    @classmethod
    def generate(cls):
        privkey, _ = CT_pick_keypair()
        return cls(privkey)

    def export_hex(self):
        # only for "keygen" command, nothing else should call this
        return '0x' + self._privkey.hex()

    def sign_hash(self, msg_hash):
        return CT_sign(self._privkey, msg_hash)

def personal_message_hash(payload):
    # EIP-191 version 0x45: prefix + ascii decimal length + payload
    return keccak256(PERSONAL_MSG_PREFIX + str(len(payload)).encode('ascii') + payload)

def sign(digest, identity):
    # returns SignedDigest(65-byte signature, checksum address)
    if identity is None:
        raise SigningUnavailable('No operator key configured')
    assert len(digest) == DIGEST_SIZE

    sig = identity.sign_hash(personal_message_hash(digest))

    return SignedDigest(sig, identity.address)

def recover_signer(digest, signature):
    # who signed this digest? returns checksum address, raises ValueError
    pubkey = CT_sig_to_pubkey(personal_message_hash(digest), signature)
    return render_address(pubkey_to_address(pubkey))

def verify(digest, signature, address):
    # True if signature over digest came from address (any case)
    try:
        got = recover_signer(digest, signature)
    except ValueError:
        return False
    return got.lower() == address.lower()

# EOF
