"""Backup bounded context.

Exports the stored permission model (groups, tracks and users) into a
replayable command script.
"""
