"""
Security components for officer records.

Submodules:
- roles, context: actors, roles and capability tiers
- policies: per (role, field) access policy store
- field_permissions: visibility resolution, masking and record filtering
- audit: append-only disclosure records
- unmask: request / second factor / approval / disclosure workflow
"""
