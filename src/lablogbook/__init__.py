"""Lab logbook package.

This package is organized by feature modules (users, sessions, attendance,
enrollment, feedback) with a thin Flask controller layer on top of
service/repository layers.
"""
