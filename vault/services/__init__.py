"""
High-level use cases for the record vault.

VaultService orchestrates the selected backend, the JSON snapshot files and
the event notifier. Scripts call the service instead of touching storage.
"""
