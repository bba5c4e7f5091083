#!/usr/bin/env python
#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
# To use this, install with:
#
#   pip install --editable '.[cli]'
#
# That will create the command "pnrsign" in your path.
#
#
import click, sys, json

from pnrsign.config import Settings
from pnrsign.constants import DIGEST_LAYOUT
from pnrsign.digest import SigningRequest, pack_fields, check_user
from pnrsign.exceptions import SignerError
from pnrsign.service import PnrSigner
from pnrsign.signer import SigningIdentity, recover_signer
from pnrsign.utils import B2A, HEX0X, from_hex0x
from pnrsign import __version__

# dict of options that apply to all commands
global global_opts
global_opts = dict()

# Cleanup display (supress traceback) for user-feedback exceptions
_sys_excepthook = sys.excepthook
def my_hook(ty, val, tb):
    if issubclass(ty, (SignerError, RuntimeError)):
        print("FATAL: %s" % val, file=sys.stderr)
    else:
        return _sys_excepthook(ty, val, tb)
sys.excepthook=my_hook

def fail(msg):
    # show message and stop
    click.echo(f"FAILURE: {msg}", err=True)
    sys.exit(1)

def get_signer(need_key=True):
    # settings from environment (+ .env), key loaded once here
    global global_opts
    import pnrsign.service as ss
    ss.VERBOSE = bool(global_opts.get('verbose', False))

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        fail(str(exc))

    try:
        signer = PnrSigner.from_settings(settings)
    except SignerError as exc:
        fail(exc.msg)

    if need_key and signer.identity is None:
        fail("Set OPERATOR_PK in environment (or .env file) first.")

    return signer

def make_request(user, expires, day_id, video_id):
    return SigningRequest(user=user, expires_in_sec=expires, day_id=day_id, video_id=video_id)

def request_options(f):
    # options shared by commands that describe one signing request
    f = click.option('--video-id', '-c', type=str, default=None,
                        help="Content id (default: PNR:YYYY-MM-DD)")(f)
    f = click.option('--day-id', '-d', type=int, default=None,
                        help="Override day number (default: today, UTC)")(f)
    f = click.option('--expires', '-e', type=int, default=None, metavar="SECS",
                        help="Validity window, clamped to 60..3600 (default 900)")(f)
    return f

# Accept any prefix of a command name.
#
# from <https://click.palletsprojects.com/en/8.0.x/advanced/?#command-aliases>
class AliasedGroup(click.Group):
    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        matches = [x for x in self.list_commands(ctx)
                   if x.startswith(cmd_name)]
        if not matches:
            return None
        elif len(matches) == 1:
            return click.Group.get_command(self, ctx, matches[0])
        ctx.fail(f"Abiguous command. Pick one of: {' | '.join(sorted(matches))}")

    def resolve_command(self, ctx, args):
        # always return the full command name
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name, cmd, args


#
# Options we want for all commands
#
@click.group(cls=AliasedGroup)
@click.option('--verbose', '-v', is_flag=True,
                    help="Trace each signing on stderr.")
@click.option('--pdb', is_flag=True,
                    help="Prepare patient for surgery to remove bugs.")
@click.version_option(version=__version__)
def main(**kws):
    '''
    Issue and check PNR ("proof of play") authorizations.

    Operator key comes from OPERATOR_PK in the environment or a .env file.
    Any distinct prefix works for all commands.
    '''
    # implement PDB option here
    if kws.pop('pdb', False):
        import pdb
        def doit(ex_cls, ex, tb):
            pdb.pm()
        sys.excepthook = doit

    # global options, used by get_signer()
    global global_opts
    global_opts.update(kws)


@main.command('sign')
@click.argument('user')
@request_options
@click.option('--now', type=int, default=None, metavar="UNIX_TIME", help="Pretend it is this time")
def sign_request(user, expires, day_id, video_id, now):
    "Sign an authorization for USER, print JSON like the web endpoint"
    signer = get_signer()

    try:
        rv = signer.issue(make_request(user, expires, day_id, video_id), now=now)
    except SignerError as exc:
        fail(f'{exc.kind}: {exc.msg}')

    click.echo(json.dumps(rv, indent=2))

@main.command('digest')
@click.argument('user')
@request_options
@click.option('--now', type=int, default=None, metavar="UNIX_TIME", help="Pretend it is this time")
def show_digest(user, expires, day_id, video_id, now):
    "Show the packed fields and digest, without signing"
    signer = get_signer(need_key=False)
    s = signer.settings

    try:
        bd = signer.prepare(make_request(user, expires, day_id, video_id), now=now)
    except SignerError as exc:
        fail(f'{exc.kind}: {exc.msg}')

    raw = pack_fields(s.chain_id, s.contract_address, check_user(user),
                        bd.day_id, bd.video_id_hash, bd.expires_at)
    pos = 0
    for name, ty, width in DIGEST_LAYOUT:
        click.echo('%-10s %-8s %s' % (name, ty, B2A(raw[pos:pos+width])))
        pos += width

    click.echo('')
    click.echo(f'videoIdStr: {bd.video_id_str}')
    click.echo(f'dayId: {bd.day_id}')
    click.echo(f'expiresAt: {bd.expires_at}')
    click.echo(f'digest: {HEX0X(bd.digest)}')

@main.command('verify')
@click.argument('digest')
@click.argument('sig')
@click.option('--expect', '-a', type=str, default=None, metavar="0x...",
                    help="Fail unless signed by this address")
def verify_sig(digest, sig, expect):
    "Recover who signed DIGEST (personal-message convention)"
    try:
        digest = from_hex0x(digest, 32)
        sig = from_hex0x(sig, 65)
        who = recover_signer(digest, sig)
    except ValueError as exc:
        fail(str(exc))

    if expect and expect.lower() != who.lower():
        fail(f"Signed by {who}, not {expect}")

    click.echo(who)

@main.command('address')
def show_address():
    "Show address of the configured operator key"
    signer = get_signer()
    click.echo(signer.signer_address)

@main.command('keygen')
def make_key():
    "Pick a new operator key (shown ONCE, keep it secret)"
    ident = SigningIdentity.generate()

    click.echo(f'OPERATOR_PK={ident.export_hex()}')
    click.echo(f'# address: {ident.address}', err=True)

@main.command('request')
@click.argument('url')
@click.argument('user')
@request_options
def remote_request(url, user, expires, day_id, video_id):
    "POST to a deployed signer at URL and verify what it returns"
    from pnrsign.remote import SignerConnection

    conn = SignerConnection(url)
    rv = conn.request(user, expires_in_sec=expires, day_id=day_id, video_id=video_id)

    click.echo(json.dumps(rv, indent=2))
    click.echo(f"Signature checks out: {rv['signer']}", err=True)

@main.command('serve')
@click.option('--host', default='127.0.0.1', help="Interface to listen on")
@click.option('--port', '-p', type=int, default=8888, help="TCP port")
def run_server(host, port):
    "Run the HTTP endpoint (development server)"
    from pnrsign.server import create_app

    app = create_app()
    app.run(host=host, port=port, threaded=True)

# EOF
