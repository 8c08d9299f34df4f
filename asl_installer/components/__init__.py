"""
Component modules for the installer.

Each add-on lives in its own package as ``<name>/<name>_installer.py`` and
registers itself with ``ComponentRegistry`` when imported.
"""
