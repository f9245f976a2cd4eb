"""Level Up talent tracking service."""
