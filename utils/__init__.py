"""Shared helpers: identifiers, tokens, request parsing, mail and images."""
