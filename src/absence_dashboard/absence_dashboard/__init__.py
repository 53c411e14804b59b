"""Absence Dashboard package.

Organized by feature modules (events, users, groups, reference data) on top of
a single access policy, with a thin Flask controller layer and
service/repository layers backed by the remote absence API.
"""
