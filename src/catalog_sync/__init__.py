"""
catalog-sync - reconcile Kubernetes-derived service registrations into a
service catalog.

Given a registration collected from cluster metadata, the reconciler:
- Finds the catalog entry by alias, or creates it
- Updates descriptive fields of an existing entry
- Upserts aliases, tags, tools and repository attachments
"""

__version__ = "0.1.0"
