#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#

__version__ = '1.0.0'

__all__ = [ 'digest', 'signer', 'service', 'exceptions', 'constants', 'config', 'utils' ]

# derive day/content ids and the packed digest
from pnrsign.digest import SigningRequest, build

# operator key and personal-message signing
from pnrsign.signer import SigningIdentity, sign, recover_signer

# the whole request => response flow
from pnrsign.service import PnrSigner
