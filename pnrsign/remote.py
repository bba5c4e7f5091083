#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Talk to a deployed signer (ours or the old Netlify function) and check
# what it hands back before trusting it.
#
# - Requires 'requests' module
#
from .digest import SigningRequest, pack_fields, check_user
from .compat import keccak256
from .signer import recover_signer
from .utils import from_hex0x

class SignerConnection:

    def __init__(self, url, timeout=15):
        import requests
        self.ses = requests.Session()
        self.url = url
        self.timeout = timeout

    def post_json(self, body):
        r = self.ses.post(self.url, json=body, timeout=self.timeout)
        try:
            rv = r.json()
        except ValueError:
            raise RuntimeError(f'Signer replied {r.status_code} with non-JSON body')

        if r.status_code != 200:
            err = rv.get('error', '???') if isinstance(rv, dict) else '???'
            raise RuntimeError(f'Signer refused ({r.status_code}): {err}')

        return rv

    def request(self, user, expires_in_sec=None, day_id=None, video_id=None):
        body = dict(user=user)
        if expires_in_sec is not None:
            body['expiresInSec'] = expires_in_sec
        if day_id is not None:
            body['dayId'] = day_id
        if video_id:
            body['videoId'] = video_id

        rv = self.post_json(body)
        check_response(SigningRequest.from_json(body), rv)

        return rv

def check_response(req, resp):
    # Recompute digest from the reply's own fields and confirm the signature.
    # - raises RuntimeError on any mismatch
    video_hash = keccak256(resp['videoIdStr'].encode('utf-8'))
    if from_hex0x(resp['videoIdBytes32'], 32) != video_hash:
        raise RuntimeError('videoIdBytes32 does not match videoIdStr')

    preimage = pack_fields(resp['chainId'], resp['contract'], check_user(req.user),
                            resp['dayId'], video_hash, resp['expiresAt'])
    digest = keccak256(preimage)
    if from_hex0x(resp['digest'], 32) != digest:
        raise RuntimeError('Digest does not match the fields returned')

    got = recover_signer(digest, from_hex0x(resp['sig'], 65))
    if got.lower() != resp['signer'].lower():
        raise RuntimeError(f'Signature is from {got}, not {resp["signer"]}')

    return got

# EOF
