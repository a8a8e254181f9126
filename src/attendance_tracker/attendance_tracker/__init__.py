"""Attendance Tracker package.

Feature modules (users, students, courses, events, attendance, ...) each carry a
model, a repository interface with its MySQL implementation, a service and a
thin Flask controller.
"""
