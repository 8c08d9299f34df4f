"""
Shared helpers for the ASL3 multi-app installer: command execution, apt and
pip handling, downloads, file backups, cron entries and logging setup.
"""
