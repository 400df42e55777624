"""Class roster package.

Builds the daily attendance list ("Lista de Presença") of a training centre:
projects class instances from schedule templates, reconciles them with the
instances already persisted, and runs the pre-check-in / presence workflow.
Organized by feature modules with a thin Flask controller layer on top of
service/repository layers.
"""
