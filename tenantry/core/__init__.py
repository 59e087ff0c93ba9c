# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""Core tenancy primitives: context, claims, resolution, config, logging."""
