#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# service.py
#
# Request in, signed authorization out. Ties digest.build() to signer.sign()
# and shapes the response the web client and contract tooling expect.
#
import sys

from .config import Settings
from .digest import SigningRequest, build
from .exceptions import SignerError, SigningUnavailable, InternalFailure
from .signer import sign
from .utils import HEX0X, unix_now

# Change this to see each request traced on stderr (never shows keys)
VERBOSE = False

def trace(msg):
    if VERBOSE:
        print(msg, file=sys.stderr)

class PnrSigner:
    #
    # One per process. Holds settings and the (optional) operator identity.
    #
    # - no mutable state, safe to share between threads
    #
    def __init__(self, settings=None, identity=None):
        self.settings = settings or Settings()
        self.identity = identity

    def __repr__(self):
        who = self.identity.address if self.identity else 'no key'
        return '<%s chain=%d %s>' % (self.__class__.__name__, self.settings.chain_id, who)

    @classmethod
    def from_settings(cls, settings):
        # key problems surface now, not on first request
        return cls(settings, settings.load_identity())

    @property
    def signer_address(self):
        return self.identity.address if self.identity else None

    def prepare(self, request, now=None):
        # Digest only, no signature. Accepts SigningRequest or decoded JSON.
        if not isinstance(request, SigningRequest):
            request = SigningRequest.from_json(request)
        if now is None:
            now = unix_now()

        s = self.settings
        return build(request, now, chain_id=s.chain_id, contract=s.contract_address,
                        allow_day_override=s.allow_day_override)

    def issue(self, request, now=None):
        # Build and sign. Returns the response dict, or raises a SignerError.
        if self.identity is None:
            # refuse before doing any work: no partial output
            raise SigningUnavailable('No operator key configured')

        try:
            bd = self.prepare(request, now)
            sd = sign(bd.digest, self.identity)
        except SignerError:
            raise
        except Exception as exc:
            raise InternalFailure(f'{exc.__class__.__name__}: {exc}') from exc

        trace(f'signed day={bd.day_id} video={bd.video_id_str!r} '
                f'exp={bd.expires_at} digest={HEX0X(bd.digest)}')

        return dict(dayId=bd.day_id,
                    videoIdStr=bd.video_id_str,
                    videoIdBytes32=HEX0X(bd.video_id_hash),
                    expiresAt=bd.expires_at,
                    digest=HEX0X(bd.digest),
                    sig=HEX0X(sd.signature),
                    signer=sd.signer,
                    contract=self.settings.contract_address,
                    chainId=self.settings.chain_id)

# EOF
