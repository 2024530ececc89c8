"""Parade System package.

Feature modules (cadets, parades, permissions, attendance, reports,
notifications) with a thin Flask controller layer on top of
service/repository layers.
"""
