#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# server.py
#
# HTTP face of the signer, behaves like the old Netlify function:
#
#   OPTIONS /pnr-sign   -> 200, CORS headers only
#   POST    /pnr-sign   -> signed authorization (JSON)
#   other methods       -> 405
#   GET     /health     -> liveness + which signer/contract we are
#
import logging
from flask import Flask, Response, jsonify, request

from .config import Settings
from .constants import SIGN_ROUTES
from .exceptions import SignerError, SigningUnavailable, InvalidRequest, InternalFailure
from .service import PnrSigner

def cors_headers(origin, allowed=None):
    # Echo the allow-listed origin when it matches; otherwise same-origin
    # style: echo whatever asked, or "*"
    if allowed and origin and origin == allowed:
        allow = origin
    else:
        allow = origin or '*'

    return {
        'Access-Control-Allow-Origin': allow,
        'Access-Control-Allow-Headers': 'Content-Type',
        'Access-Control-Allow-Methods': 'POST, OPTIONS',
        'Vary': 'Origin',
    }

def json_reply(status, body, headers):
    resp = jsonify(body)
    resp.status_code = status
    resp.headers.update(headers)
    return resp

def error_reply(exc, headers):
    # only internal failures carry a message; the rest are just the tag
    body = dict(error=exc.kind)
    if exc.kind == 'SIGN_FAIL':
        body['message'] = exc.msg
    return json_reply(exc.http_status, body, headers)

def read_body():
    # empty body is "{}"; anything that isn't a JSON object is the caller's fault
    if not request.get_data():
        return {}
    try:
        body = request.get_json(force=True, silent=True)
    except RecursionError:
        # silent= only covers ValueError
        raise InvalidRequest('Body is nested too deeply') from None
    if not isinstance(body, dict):
        raise InvalidRequest('Request body must be a JSON object')
    return body

def create_app(settings=None, signer=None):
    # Application factory. Key is loaded here, once.
    app = Flask(__name__)

    if not app.logger.handlers:
        logging.basicConfig(level=logging.INFO,
                            format='%(asctime)s %(levelname)s %(name)s - %(message)s')

    if signer is None:
        settings = settings or Settings.from_env()
        try:
            signer = PnrSigner.from_settings(settings)
        except SigningUnavailable as exc:
            # keep serving: every sign request will report it
            app.logger.error('Operator key unusable: %s', exc)
            signer = PnrSigner(settings, None)

    if signer.identity is None:
        app.logger.warning('No operator key; signing requests will fail')
    else:
        app.logger.info('Signing as %s for chain %d', signer.identity.address,
                            signer.settings.chain_id)

    app.config['PNR_SIGNER'] = signer
    allowed = signer.settings.allowed_origin

    def sign_endpoint():
        hdrs = cors_headers(request.headers.get('Origin', ''), allowed)

        if request.method == 'OPTIONS':
            return Response('', status=200, headers=hdrs)

        if request.method != 'POST':
            return json_reply(405, dict(error='METHOD_NOT_ALLOWED'), hdrs)

        try:
            if signer.identity is None:
                raise SigningUnavailable('No operator key configured')
            rv = signer.issue(read_body())
        except SignerError as exc:
            app.logger.info('Refused: %s (%s)', exc.kind, exc.msg)
            return error_reply(exc, hdrs)
        except Exception as exc:
            # anything else still gets a JSON reply with CORS headers
            app.logger.exception('Unexpected failure')
            return error_reply(InternalFailure(f'{exc.__class__.__name__}: {exc}'), hdrs)

        app.logger.debug('Signed for day %d, expires %d', rv['dayId'], rv['expiresAt'])
        return json_reply(200, rv, hdrs)

    for n, path in enumerate(SIGN_ROUTES):
        app.add_url_rule(path, f'pnr_sign_{n}', sign_endpoint,
                            methods=['GET', 'POST', 'OPTIONS', 'PUT', 'DELETE', 'PATCH'],
                            provide_automatic_options=False)

    @app.route('/health', methods=['GET'])
    def health():
        return json_reply(200, dict(ok=True,
                                    signer=signer.signer_address,
                                    chainId=signer.settings.chain_id,
                                    contract=signer.settings.contract_address), {})

    return app

# EOF
