"""tenant-cli: command-line client for a tenant management API."""
