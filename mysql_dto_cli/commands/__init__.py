"""CLI commands for mysql-dto-cli."""
