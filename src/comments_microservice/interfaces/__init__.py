"""Ports of the comments microservice.

Framework-free ABCs, DTOs and the error taxonomy shared by the service layer
and the adapters. Do NOT import from adapters, bootstrap, or entrypoints.
"""
