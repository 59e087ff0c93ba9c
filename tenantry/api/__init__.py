# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""HTTP surface: dependencies, middleware, error handlers and routers."""
