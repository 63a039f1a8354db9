"""HTTP API for Strata."""
