"""ZenCorp workforce management package.

Feature modules (catalogs, employees, tasks, attendance, messaging, ...)
sit behind a thin Flask controller layer; business rules live in services
that depend on repository protocols.
"""
