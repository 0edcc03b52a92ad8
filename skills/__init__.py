"""Skill portal application.

Services, serializers, views and route registrations for the hospital
skill-assessment and training portal.  All domain data is read from and
written to the hosted store; this app keeps a normalized copy of it.
"""
