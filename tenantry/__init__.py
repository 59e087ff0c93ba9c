# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""Tenantry — tenant isolation core for a multi-tenant HR backend."""
