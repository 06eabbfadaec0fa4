"""HTTP backend exposing the governance core."""
