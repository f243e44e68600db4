"""Facility operations portal.

Feature modules (users, attendance, permits) follow the same split as the rest
of the codebase: a thin Flask controller layer over service and repository
layers. The ``backend`` package holds the write dispatcher, the live-query hub
and the process-wide error channel shared by every feature.
"""
