"""OCM domain modules: accounts, clusters, and identity providers."""
