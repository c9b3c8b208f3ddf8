"""Entry point for tcli.

The system trust store is injected before the CLI modules import requests.
"""

from tenantcli.ssl_trust import inject_os_trust

inject_os_trust()

from tenantcli.main import cli  # noqa: E402

if __name__ == "__main__":
    cli()
