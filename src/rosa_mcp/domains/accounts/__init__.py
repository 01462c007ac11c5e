"""OCM account domain."""
