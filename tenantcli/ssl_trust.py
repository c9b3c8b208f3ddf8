"""Make requests trust the operating system certificate store via truststore.

TCLI_DISABLE_OS_TRUST=1 keeps the bundled certifi store; TCLI_FORCE_OS_TRUST=1
turns an injection failure into a hard error.
"""

import click

from .utils import env_flag

# read by the hidden `_ca-info` command
OS_TRUST_INJECTED = False
OS_TRUST_REASON = "not-attempted"


def inject_os_trust() -> None:
    """Inject the system trust store, falling back to certifi on failure."""
    global OS_TRUST_INJECTED, OS_TRUST_REASON
    if env_flag("TCLI_DISABLE_OS_TRUST"):
        OS_TRUST_INJECTED, OS_TRUST_REASON = False, "disabled-env"
        return

    try:
        import truststore

        truststore.inject_into_ssl()
    except Exception as exc:
        if env_flag("TCLI_FORCE_OS_TRUST"):
            raise
        click.echo(f"[tcli] system trust store injection skipped: {exc}", err=True)
        OS_TRUST_INJECTED, OS_TRUST_REASON = False, f"error:{exc.__class__.__name__}"
        return

    OS_TRUST_INJECTED, OS_TRUST_REASON = True, "injected:ssl"
