"""mysql-dto-cli - TypeScript DTO generation from a MySQL catalog."""

__version__ = "0.1.0"
