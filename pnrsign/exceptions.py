#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Exceptions
#
# - kind is the machine-readable tag the HTTP layer puts in {"error": ...}
# - messages must never contain key material
#

class SignerError(RuntimeError):
    kind = 'SIGN_FAIL'
    http_status = 500

    def __init__(self, msg=None):
        self.msg = msg or self.kind
        super().__init__(self.msg)

    def as_dict(self):
        return dict(error=self.kind, message=self.msg)

class InvalidUser(SignerError):
    # user address failed validation; caller can fix and retry
    kind = 'BAD_USER'
    http_status = 400

class InvalidRequest(SignerError):
    # other caller-side problems: body shape, rejected dayId override
    kind = 'BAD_REQUEST'
    http_status = 400

class SigningUnavailable(SignerError):
    # operator key missing or unusable: deployment problem, not per-request
    kind = 'MISSING_OPERATOR_PK'
    http_status = 500

class InternalFailure(SignerError):
    # unexpected exception while hashing/signing: treat as a bug
    kind = 'SIGN_FAIL'
    http_status = 500

# EOF
