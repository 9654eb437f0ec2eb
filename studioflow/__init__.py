"""Content-production workflow tracking.

The :mod:`studioflow.workflow` package holds the document model and the
state-transition engine; :mod:`studioflow.storage` provides the adapters that
persist the document.
"""
