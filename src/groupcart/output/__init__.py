"""Output rendering for the groupcart CLI."""
