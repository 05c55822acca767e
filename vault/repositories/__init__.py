"""
Persistence adapters.

These modules encapsulate how records are stored/retrieved (a JSON file on
disk, or a SQL database when one is reachable). Services depend on the
RecordBackend protocol rather than touching the file or the session directly.
"""
