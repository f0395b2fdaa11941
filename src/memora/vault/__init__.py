"""Memory vault: the in-memory collection and its key-value mirror.

Layout (FileBackend):
    ~/.memora/vault/
    └── memora_vault.json      # Full collection, rewritten after every add/delete

The backend is read exactly once, when the store is initialized. Everything
after that reads from memory; the backend is only ever written.
"""
