"""HTTP routes for the bridge service."""
