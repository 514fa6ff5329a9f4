"""Presence Tracker package.

Feature modules (attendance, leaves, employees, reports, auth) each carry a
domain model, a repository interface with a MySQL implementation, and a
service layer. A thin Flask JSON layer sits on top.
"""
