import pytest

# well-known test key (from eth-account docs); never use for anything real
TEST_PRIVKEY = '0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318'
TEST_ADDRESS = '0x2c7536E3605D9C16a7a3D7b1898e529396a65c23'

# EIP-55 example address, used as the "player"
USER = '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed'

# 2024-01-15T00:00:00Z
JAN15 = 1705276800

@pytest.fixture(scope='session')
def identity():
    from pnrsign.signer import SigningIdentity
    return SigningIdentity.from_hex(TEST_PRIVKEY)

@pytest.fixture
def settings():
    from pnrsign.config import Settings
    return Settings(operator_private_key=TEST_PRIVKEY)

@pytest.fixture
def signer(settings, identity):
    from pnrsign.service import PnrSigner
    return PnrSigner(settings, identity)

@pytest.fixture
def client(signer):
    from pnrsign.server import create_app
    app = create_app(signer=signer)
    app.testing = True
    return app.test_client()

# EOF
