"""
Notekeep Application.

- backend/: Notes, contacts and accounts API, database, blob storage, configuration
"""
