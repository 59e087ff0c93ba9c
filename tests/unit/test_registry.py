# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.
"""Registry completeness: every tenant-owned table must be isolated."""

from tenantry.storage.database import Base
from tenantry.storage.models import Department, Employee, Region, Tenant, TenantScopedMixin, User
from tenantry.storage.registry import GLOBAL_MODELS, TENANT_SCOPED_MODELS, is_tenant_scoped


def _mapped_classes():
    return {mapper.class_ for mapper in Base.registry.mappers}


class TestTenantScopedRegistry:
    def test_every_mapped_class_is_classified(self):
        classified = set(TENANT_SCOPED_MODELS) | set(GLOBAL_MODELS)
        assert _mapped_classes() == classified

    def test_no_class_is_both_global_and_scoped(self):
        assert not set(TENANT_SCOPED_MODELS) & set(GLOBAL_MODELS)

    def test_no_duplicates(self):
        assert len(set(TENANT_SCOPED_MODELS)) == len(TENANT_SCOPED_MODELS)

    def test_every_non_nullable_tenant_column_is_registered(self):
        for cls in _mapped_classes():
            column = cls.__table__.columns.get("tenant_id")
            if column is not None and not column.nullable:
                assert cls in TENANT_SCOPED_MODELS, f"{cls.__name__} owns tenant data but is not registered"

    def test_every_mixin_user_is_registered(self):
        for cls in _mapped_classes():
            if issubclass(cls, TenantScopedMixin):
                assert cls in TENANT_SCOPED_MODELS, cls.__name__

    def test_registered_models_have_required_tenant_column(self):
        for cls in TENANT_SCOPED_MODELS:
            column = cls.__table__.columns["tenant_id"]
            assert column.nullable is False, cls.__name__

    def test_global_models_not_scoped(self):
        for cls in (Region, Tenant, User):
            assert not is_tenant_scoped(cls)

    def test_lookup_by_instance_and_class(self):
        assert is_tenant_scoped(Department)
        assert is_tenant_scoped(Employee(first_name="a"))
        assert not is_tenant_scoped(object())
