"""
Persistence adapters implementing core.ports.TaskRepo.

- json_file.py: whole-file JSON array in the per-user data directory
- remote.py: line protocol client for a sync peer ("read\n" / "write\n" + JSON)
- codec.py: JSON encoding shared by both sides of the wire
"""
