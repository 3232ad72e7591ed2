"""Identity use cases: sign up, log in, log out."""
