"""PontoExato package.

Feature modules (companies, employees, records, punch, requests, ...) each
carry their model, repository interface, MySQL implementation, service and a
thin Flask controller.
"""
