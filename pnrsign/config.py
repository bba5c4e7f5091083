#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# Process-wide settings, read once at startup.
#
# Environment (a .env file in the working directory is also read, but never
# overrides values already set):
#
#   OPERATOR_PK             operator private key, hex (required to sign)
#   PNR_CHAIN_ID            default 137
#   PNR_CONTRACT            verifier contract address
#   ORIGIN_ALLOW            site allowed by CORS (optional)
#   PNR_ALLOW_DAY_OVERRIDE  accept caller's dayId (default: yes)
#
import os
from dataclasses import dataclass, field
from dotenv import load_dotenv
from eth_utils import is_address

from .constants import DEFAULT_CHAIN_ID, DEFAULT_CONTRACT
from .compat import render_address
from .exceptions import SigningUnavailable
from .signer import SigningIdentity

TRUE_WORDS = { '1', 'true', 'yes', 'on' }
FALSE_WORDS = { '0', 'false', 'no', 'off' }

def env_flag(raw, default):
    if raw is None or not raw.strip():
        return default
    raw = raw.strip().lower()
    if raw in TRUE_WORDS:
        return True
    if raw in FALSE_WORDS:
        return False
    raise ValueError(f'Expected yes/no value, got: {raw!r}')

@dataclass(frozen=True)
class Settings:
    operator_private_key: str = field(default=None, repr=False)
    chain_id: int = DEFAULT_CHAIN_ID
    contract_address: str = DEFAULT_CONTRACT
    allowed_origin: str = None
    allow_day_override: bool = True

    def __post_init__(self):
        if not isinstance(self.chain_id, int) or isinstance(self.chain_id, bool) \
                or not (0 < self.chain_id < (1 << 256)):
            raise ValueError(f'Bad chain id: {self.chain_id!r}')
        if not is_address(self.contract_address or ''):
            raise ValueError(f'Bad contract address: {self.contract_address!r}')

        # store the checksum form, that's what we report back
        object.__setattr__(self, 'contract_address', render_address(self.contract_address))

    @classmethod
    def from_env(cls, environ=None, dotenv=True):
        if dotenv and environ is None:
            load_dotenv(override=False)
        env = os.environ if environ is None else environ

        chain_id = env.get('PNR_CHAIN_ID', '').strip()
        try:
            chain_id = int(chain_id, 0) if chain_id else DEFAULT_CHAIN_ID
        except ValueError:
            raise ValueError(f'PNR_CHAIN_ID is not a number: {chain_id!r}') from None

        return cls(operator_private_key=(env.get('OPERATOR_PK') or None),
                    chain_id=chain_id,
                    contract_address=(env.get('PNR_CONTRACT') or DEFAULT_CONTRACT).strip(),
                    allowed_origin=(env.get('ORIGIN_ALLOW') or None),
                    allow_day_override=env_flag(env.get('PNR_ALLOW_DAY_OVERRIDE'), True))

    def load_identity(self, required=False):
        # Returns SigningIdentity, or None if no key configured (and not required).
        # - a key that IS configured but broken always raises
        if not self.operator_private_key:
            if required:
                raise SigningUnavailable('No operator key configured')
            return None

        return SigningIdentity.from_hex(self.operator_private_key)

# EOF
