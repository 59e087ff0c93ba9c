# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""Persistence: tenant-bound sessions, models and the tenant-scoped registry."""
