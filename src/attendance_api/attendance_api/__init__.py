"""Attendance API package.

Feature modules (employees, attendance, mail, reports, health) each carry a
model, a repository Protocol with its MySQL implementation, a service and a
thin Flask controller.
"""
