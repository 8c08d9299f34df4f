"""
Add-on installer framework.

This package holds the settings model, the component base class and
registry, the rpt.conf patcher, the orchestrator, and one component module
per AllStarLink add-on under ``asl_installer.components``.
"""
