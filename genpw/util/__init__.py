"""genpw utilities: secure memory, random source, platform hardening."""
