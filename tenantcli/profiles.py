"""Tenant configuration and credential lookup for tcli.

Tenants are stored in ~/.config/tcli/config.json with the following structure:
{
  "default-tenant": "acme.eu.example.com",
  "tenants": {
    "acme.eu.example.com": {
      "domain": "acme.eu.example.com",
      "name": "Acme (EU)"
    }
  }
}

Access tokens are never written to this file. They are kept in the system
keyring under the service ``tenant-cli``, keyed by tenant domain.
"""

import json
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import keyring
from keyring.errors import PasswordDeleteError

KEYRING_SERVICE = "tenant-cli"


@dataclass
class Tenant:
    """A tenant the CLI can talk to."""

    domain: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert tenant to dictionary for serialization."""
        result: Dict[str, Any] = {"domain": self.domain}
        if self.name:
            result["name"] = self.name
        return result

    @classmethod
    def from_dict(cls, domain: str, data: Dict[str, Any]) -> "Tenant":
        """Create a Tenant from a dictionary."""
        return cls(domain=data.get("domain", domain), name=data.get("name"))


@dataclass
class TenantConfig:
    """Configuration file manager for tenants."""

    default_tenant: Optional[str] = None
    tenants: Dict[str, Tenant] = field(default_factory=dict)

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the path to the configuration file."""
        if "TCLI_CONFIG" in os.environ:
            return Path(os.environ["TCLI_CONFIG"])

        if "XDG_CONFIG_HOME" in os.environ:
            config_dir = Path(os.environ["XDG_CONFIG_HOME"]) / "tcli"
        else:
            config_dir = Path.home() / ".config" / "tcli"
        return config_dir / "config.json"

    @classmethod
    def load(cls) -> "TenantConfig":
        """Load configuration from file."""
        config_path = cls.get_config_path()
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            raise click.ClickException(f"Failed to read configuration {config_path}: {exc}")

        tenants = {
            domain: Tenant.from_dict(domain, tenant_data)
            for domain, tenant_data in data.get("tenants", {}).items()
        }
        return cls(default_tenant=data.get("default-tenant"), tenants=tenants)

    def save(self) -> None:
        """Save configuration to file with owner-only permissions."""
        config_path = self.get_config_path()

        data: Dict[str, Any] = {}
        if self.default_tenant:
            data["default-tenant"] = self.default_tenant
        data["tenants"] = {domain: tenant.to_dict() for domain, tenant in self.tenants.items()}

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            try:
                config_path.chmod(stat.S_IRUSR | stat.S_IWUSR)
            except OSError:
                # chmod is a no-op on some platforms (e.g., Windows)
                pass
        except OSError as e:
            raise click.ClickException(f"Failed to save configuration: {e}")

    def add_tenant(self, tenant: Tenant, set_default: bool = False) -> None:
        """Add or update a tenant."""
        self.tenants[tenant.domain] = tenant
        if set_default or not self.default_tenant:
            self.default_tenant = tenant.domain

    def remove_tenant(self, domain: str) -> bool:
        """Remove a tenant. Returns True if removed, False if not found."""
        if domain not in self.tenants:
            return False

        del self.tenants[domain]
        if self.default_tenant == domain:
            self.default_tenant = next(iter(self.tenants), None)
        return True

    def set_default_tenant(self, domain: str) -> None:
        """Set the default tenant."""
        if domain not in self.tenants:
            raise click.ClickException(f"Tenant '{domain}' is not configured")
        self.default_tenant = domain

    def list_tenants(self) -> List[Tenant]:
        """List all tenants."""
        return list(self.tenants.values())


def resolve_tenant(override: Optional[str] = None) -> str:
    """Return the tenant domain to use for this invocation.

    Priority order:
    1. --tenant option
    2. TCLI_TENANT environment variable
    3. default-tenant from the config file
    """
    if override:
        return override

    env_tenant = os.environ.get("TCLI_TENANT")
    if env_tenant:
        return env_tenant

    config = TenantConfig.load()
    if config.default_tenant:
        return config.default_tenant

    raise click.ClickException(
        "No tenant configured. Run 'tcli login' or pass --tenant <domain>."
    )


def get_access_token(tenant: str) -> str:
    """Return the bearer token for ``tenant`` from TCLI_ACCESS_TOKEN or the keyring."""
    token = os.environ.get("TCLI_ACCESS_TOKEN")
    if not token:
        token = keyring.get_password(KEYRING_SERVICE, tenant)
    if not token:
        raise click.ClickException(
            f"No access token found for tenant '{tenant}'. Run 'tcli login' "
            "or set TCLI_ACCESS_TOKEN."
        )
    return token


def store_access_token(tenant: str, token: str) -> None:
    """Persist the bearer token for ``tenant`` in the keyring."""
    keyring.set_password(KEYRING_SERVICE, tenant, token)


def delete_access_token(tenant: str) -> None:
    """Remove the stored token for ``tenant``; missing entries are ignored."""
    try:
        keyring.delete_password(KEYRING_SERVICE, tenant)
    except PasswordDeleteError:
        pass
