"""Domain layer: value objects, store protocols and the sieve repository."""
