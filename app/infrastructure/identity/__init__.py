"""Identity adapters: password hashing."""
