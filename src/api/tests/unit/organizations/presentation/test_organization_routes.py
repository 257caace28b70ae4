"""Unit tests for organization routes."""

from __future__ import annotations

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from organizations.application.services import OrganizationService
from organizations.dependencies.organization import get_organization_service
from organizations.domain.exceptions import (
    CrossTenantHierarchyError,
    OrganizationNotFoundError,
)
from organizations.domain.organization import Organization
from organizations.domain.value_objects import OrganizationId, OrganizationStatus
from organizations.ports.exceptions import (
    DuplicateOrganizationCodeError,
    ParentOrganizationNotFoundError,
)
from organizations.presentation import router
from shared_kernel.tenant_scoping import TenantContext
from tenancy.dependencies.tenant_context import (
    get_tenant_directory,
    require_tenant_context,
)
from tenancy.ports.repositories import ITenantDirectory

TENANT_ID = "01HV0000000000000000000AAA"


@pytest.fixture
def mock_org_service() -> AsyncMock:
    return AsyncMock(spec=OrganizationService)


@pytest.fixture
def client(mock_org_service: AsyncMock) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_organization_service] = lambda: mock_org_service
    app.dependency_overrides[require_tenant_context] = lambda: TenantContext(
        tenant_id=TENANT_ID, source="header"
    )
    app.include_router(router)
    return TestClient(app)


@pytest.fixture
def root() -> Organization:
    organization, _ = Organization.create_root(
        tenant_id=TENANT_ID, name="Headquarters", code="HQ"
    )
    return organization


class TestTenantContextRequired:
    def test_routes_reject_requests_without_tenant(self, mock_org_service):
        directory = Mock(spec=ITenantDirectory)
        directory.get_by_id = AsyncMock(return_value=None)
        directory.get_by_domain = AsyncMock(return_value=None)

        app = FastAPI()
        app.dependency_overrides[get_organization_service] = lambda: mock_org_service
        app.dependency_overrides[get_tenant_directory] = lambda: directory
        app.include_router(router)

        response = TestClient(app).get("/organizations")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Tenant not found"
        mock_org_service.list_organizations.assert_not_awaited()


class TestCreateOrganization:
    def test_creates_root(self, client, mock_org_service, root):
        mock_org_service.create_organization.return_value = root

        response = client.post(
            "/organizations", json={"name": "Headquarters", "code": "HQ"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["id"] == root.id.value
        assert data["tenant_id"] == TENANT_ID
        assert data["level"] == 0
        assert data["parent_id"] is None
        mock_org_service.create_organization.assert_awaited_once_with(
            name="Headquarters", code="HQ", parent_id=None
        )

    def test_creates_child(self, client, mock_org_service, root):
        child, _ = Organization.create_child(root, name="Sales", code="SALES")
        mock_org_service.create_organization.return_value = child

        response = client.post(
            "/organizations",
            json={"name": "Sales", "code": "SALES", "parent_id": root.id.value},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["parent_id"] == root.id.value
        mock_org_service.create_organization.assert_awaited_once_with(
            name="Sales", code="SALES", parent_id=root.id
        )

    def test_invalid_parent_id_returns_400(self, client, mock_org_service):
        response = client.post(
            "/organizations",
            json={"name": "Sales", "code": "SALES", "parent_id": "nope"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_org_service.create_organization.assert_not_awaited()

    @pytest.mark.parametrize(
        "error",
        [
            ParentOrganizationNotFoundError("01HV0000000000000000000PPP"),
            CrossTenantHierarchyError(
                "01HV0000000000000000000PPP", "01HV0000000000000000000BBB", TENANT_ID
            ),
        ],
    )
    def test_unusable_parent_returns_404(self, client, mock_org_service, error):
        mock_org_service.create_organization.side_effect = error

        response = client.post(
            "/organizations",
            json={
                "name": "Sales",
                "code": "SALES",
                "parent_id": OrganizationId.generate().value,
            },
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_duplicate_code_returns_409(self, client, mock_org_service):
        mock_org_service.create_organization.side_effect = (
            DuplicateOrganizationCodeError("HQ")
        )

        response = client.post(
            "/organizations", json={"name": "Headquarters", "code": "HQ"}
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "   ", "code": "HQ"},
            {"name": "Headquarters", "code": "  \t "},
        ],
    )
    def test_blank_name_or_code_returns_422(self, client, mock_org_service, payload):
        response = client.post("/organizations", json=payload)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        mock_org_service.create_organization.assert_not_awaited()

    def test_name_and_code_are_stripped(self, client, mock_org_service, root):
        mock_org_service.create_organization.return_value = root

        response = client.post(
            "/organizations", json={"name": " Headquarters ", "code": " HQ"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        mock_org_service.create_organization.assert_awaited_once_with(
            name="Headquarters", code="HQ", parent_id=None
        )


class TestReadOrganizations:
    def test_list(self, client, mock_org_service, root):
        mock_org_service.list_organizations.return_value = [root]

        response = client.get("/organizations", params={"status": "active"})

        assert response.status_code == status.HTTP_200_OK
        assert [o["code"] for o in response.json()] == ["HQ"]
        mock_org_service.list_organizations.assert_awaited_once_with(
            status=OrganizationStatus.ACTIVE
        )

    def test_get(self, client, mock_org_service, root):
        mock_org_service.get_organization.return_value = root

        response = client.get(f"/organizations/{root.id.value}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["path"] == root.path

    def test_get_missing_returns_404(self, client, mock_org_service):
        organization_id = OrganizationId.generate()
        mock_org_service.get_organization.side_effect = OrganizationNotFoundError(
            organization_id.value
        )

        response = client.get(f"/organizations/{organization_id.value}")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_get_invalid_id_returns_400(self, client):
        response = client.get("/organizations/not-a-ulid")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.parametrize(
        "suffix,method",
        [
            ("children", "list_children"),
            ("descendants", "list_descendants"),
            ("ancestors", "list_ancestors"),
        ],
    )
    def test_hierarchy_routes(self, client, mock_org_service, root, suffix, method):
        getattr(mock_org_service, method).return_value = [root]

        response = client.get(f"/organizations/{root.id.value}/{suffix}")

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()) == 1
        getattr(mock_org_service, method).assert_awaited_once_with(root.id)

    def test_hierarchy_route_on_missing_anchor_returns_404(
        self, client, mock_org_service
    ):
        organization_id = OrganizationId.generate()
        mock_org_service.list_descendants.side_effect = OrganizationNotFoundError(
            organization_id.value
        )

        response = client.get(f"/organizations/{organization_id.value}/descendants")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestMutations:
    def test_rename(self, client, mock_org_service, root):
        mock_org_service.rename_organization.return_value = root

        response = client.patch(
            f"/organizations/{root.id.value}", json={"name": "Head Office"}
        )

        assert response.status_code == status.HTTP_200_OK
        mock_org_service.rename_organization.assert_awaited_once_with(
            root.id, "Head Office"
        )

    def test_rename_to_blank_returns_422(self, client, mock_org_service, root):
        response = client.patch(f"/organizations/{root.id.value}", json={"name": "   "})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        mock_org_service.rename_organization.assert_not_awaited()

    def test_update_settings(self, client, mock_org_service, root):
        mock_org_service.update_settings.return_value = root

        response = client.patch(
            f"/organizations/{root.id.value}/settings",
            json={"settings": {"region": "eu"}},
        )

        assert response.status_code == status.HTTP_200_OK
        mock_org_service.update_settings.assert_awaited_once_with(
            root.id, {"region": "eu"}
        )

    @pytest.mark.parametrize(
        "action,method",
        [
            ("activate", "activate_organization"),
            ("deactivate", "deactivate_organization"),
            ("archive", "archive_organization"),
        ],
    )
    def test_status_routes(self, client, mock_org_service, root, action, method):
        getattr(mock_org_service, method).return_value = root

        response = client.post(f"/organizations/{root.id.value}/{action}")

        assert response.status_code == status.HTTP_200_OK
        getattr(mock_org_service, method).assert_awaited_once_with(root.id)
