"""Helper modules used by the application and its scripts."""
