"""Absence Manager package.

This package is organized by feature modules (trainees, absences, schedules, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
