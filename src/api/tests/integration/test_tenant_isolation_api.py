"""End-to-end tenant isolation over the HTTP API.

Each test provisions tenants through /v1/tenants and then talks to the
tenant-scoped organization routes as those tenants.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from tenancy.infrastructure.models import TenantModel

pytestmark = pytest.mark.integration


async def provision_tenant(
    client: AsyncClient, name: str, domain: str, activate: bool = True
) -> str:
    response = await client.post("/v1/tenants", json={"name": name, "domain": domain})
    assert response.status_code == 201, response.text
    tenant_id = response.json()["id"]
    if activate:
        response = await client.post(f"/v1/tenants/{tenant_id}/activate")
        assert response.status_code == 200, response.text
    return tenant_id


def as_header(tenant_id: str) -> dict[str, str]:
    return {"X-Tenant-Id": tenant_id}


async def create_organization(
    client: AsyncClient,
    tenant_id: str,
    name: str,
    code: str,
    parent_id: str | None = None,
) -> dict:
    response = await client.post(
        "/v1/organizations",
        json={"name": name, "code": code, "parent_id": parent_id},
        headers=as_header(tenant_id),
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestOrganizationIsolation:
    @pytest.mark.asyncio
    async def test_each_tenant_lists_only_its_organizations(self, client):
        acme = await provision_tenant(client, "Acme", "acme")
        globex = await provision_tenant(client, "Globex", "globex")
        await create_organization(client, acme, "Acme HQ", "HQ")
        await create_organization(client, globex, "Globex HQ", "HQ")

        acme_orgs = (
            await client.get("/v1/organizations", headers=as_header(acme))
        ).json()
        globex_orgs = (
            await client.get("/v1/organizations", headers=as_header(globex))
        ).json()

        assert [o["name"] for o in acme_orgs] == ["Acme HQ"]
        assert [o["name"] for o in globex_orgs] == ["Globex HQ"]
        assert {o["tenant_id"] for o in acme_orgs} == {acme}

    @pytest.mark.asyncio
    async def test_other_tenant_organization_is_not_found(self, client):
        acme = await provision_tenant(client, "Acme", "acme")
        globex = await provision_tenant(client, "Globex", "globex")
        hq = await create_organization(client, acme, "Acme HQ", "HQ")

        fetched = await client.get(
            f"/v1/organizations/{hq['id']}", headers=as_header(globex)
        )
        renamed = await client.patch(
            f"/v1/organizations/{hq['id']}",
            json={"name": "Taken Over"},
            headers=as_header(globex),
        )
        archived = await client.post(
            f"/v1/organizations/{hq['id']}/archive", headers=as_header(globex)
        )
        descendants = await client.get(
            f"/v1/organizations/{hq['id']}/descendants", headers=as_header(globex)
        )

        assert fetched.status_code == 404
        assert renamed.status_code == 404
        assert archived.status_code == 404
        assert descendants.status_code == 404

        unchanged = await client.get(
            f"/v1/organizations/{hq['id']}", headers=as_header(acme)
        )
        assert unchanged.json()["name"] == "Acme HQ"
        assert unchanged.json()["status"] == "active"

    @pytest.mark.asyncio
    async def test_child_of_other_tenant_parent_is_refused(self, client):
        acme = await provision_tenant(client, "Acme", "acme")
        globex = await provision_tenant(client, "Globex", "globex")
        hq = await create_organization(client, acme, "Acme HQ", "HQ")

        response = await client.post(
            "/v1/organizations",
            json={"name": "Intruder", "code": "X", "parent_id": hq["id"]},
            headers=as_header(globex),
        )

        assert response.status_code == 404
        listed = await client.get("/v1/organizations", headers=as_header(globex))
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_hierarchy_over_http(self, client):
        acme = await provision_tenant(client, "Acme", "acme")
        hq = await create_organization(client, acme, "HQ", "HQ")
        sales = await create_organization(client, acme, "Sales", "SALES", hq["id"])
        emea = await create_organization(client, acme, "EMEA", "EMEA", sales["id"])

        descendants = await client.get(
            f"/v1/organizations/{hq['id']}/descendants", headers=as_header(acme)
        )
        ancestors = await client.get(
            f"/v1/organizations/{emea['id']}/ancestors", headers=as_header(acme)
        )
        children = await client.get(
            f"/v1/organizations/{hq['id']}/children", headers=as_header(acme)
        )

        assert emea["level"] == 2
        assert emea["path"] == f"/{hq['id']}/{sales['id']}/{emea['id']}"
        assert {o["id"] for o in descendants.json()} == {sales["id"], emea["id"]}
        assert [o["id"] for o in ancestors.json()] == [hq["id"], sales["id"]]
        assert [o["id"] for o in children.json()] == [sales["id"]]

    @pytest.mark.asyncio
    async def test_codes_are_unique_per_tenant(self, client):
        acme = await provision_tenant(client, "Acme", "acme")
        globex = await provision_tenant(client, "Globex", "globex")
        await create_organization(client, acme, "Acme HQ", "HQ")

        duplicate = await client.post(
            "/v1/organizations",
            json={"name": "Again", "code": "HQ"},
            headers=as_header(acme),
        )
        other_tenant = await client.post(
            "/v1/organizations",
            json={"name": "Globex HQ", "code": "HQ"},
            headers=as_header(globex),
        )

        assert duplicate.status_code == 409
        assert other_tenant.status_code == 201

    @pytest.mark.asyncio
    async def test_concurrent_requests_stay_in_their_tenant(self, client):
        acme = await provision_tenant(client, "Acme", "acme")
        globex = await provision_tenant(client, "Globex", "globex")
        await create_organization(client, acme, "Acme HQ", "HQ")
        await create_organization(client, globex, "Globex HQ", "HQ")

        tenants = [acme, globex] * 3
        responses = await asyncio.gather(
            *(
                client.get("/v1/organizations", headers=as_header(tenant))
                for tenant in tenants
            )
        )

        for tenant, response in zip(tenants, responses):
            assert response.status_code == 200
            assert {o["tenant_id"] for o in response.json()} == {tenant}


class TestTenantResolution:
    @pytest.mark.asyncio
    async def test_host_subdomain_resolves_tenant(self, client):
        acme = await provision_tenant(client, "Acme", "acme")

        response = await client.get(
            "/v1/context", headers={"host": "acme.bulwark.test"}
        )

        assert response.status_code == 200
        assert response.json()["tenant_id"] == acme
        assert response.json()["source"] == "host"

    @pytest.mark.asyncio
    async def test_host_takes_precedence_over_header(self, client):
        acme = await provision_tenant(client, "Acme", "acme")
        globex = await provision_tenant(client, "Globex", "globex")

        response = await client.get(
            "/v1/context",
            headers={"host": "acme.bulwark.test", **as_header(globex)},
        )

        assert response.json()["tenant_id"] == acme

    @pytest.mark.asyncio
    async def test_request_without_tenant_is_not_found(self, client):
        response = await client.get("/v1/organizations")

        assert response.status_code == 404
        assert response.json()["detail"] == "Tenant not found"

    @pytest.mark.asyncio
    async def test_unknown_and_malformed_tenants_are_not_found(self, client):
        unknown = await client.get(
            "/v1/organizations", headers=as_header("01HV0000000000000000000ZZZ")
        )
        malformed = await client.get(
            "/v1/organizations", headers=as_header("not-a-tenant")
        )

        assert unknown.status_code == 404
        assert malformed.status_code == 404


class TestTenantStatusEnforcement:
    @pytest.mark.asyncio
    async def test_pending_tenant_is_forbidden(self, client):
        pending = await provision_tenant(client, "Acme", "acme", activate=False)

        response = await client.get("/v1/organizations", headers=as_header(pending))

        assert response.status_code == 403
        assert response.json()["detail"]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_suspended_tenant_is_forbidden(self, client):
        acme = await provision_tenant(client, "Acme", "acme")
        await create_organization(client, acme, "Acme HQ", "HQ")

        suspended = await client.post(f"/v1/tenants/{acme}/suspend")
        response = await client.get("/v1/organizations", headers=as_header(acme))

        assert suspended.status_code == 200
        assert response.status_code == 403
        assert response.json()["detail"] == {
            "message": "Tenant is not active",
            "status": "suspended",
        }

    @pytest.mark.asyncio
    async def test_reactivated_tenant_regains_access(self, client):
        acme = await provision_tenant(client, "Acme", "acme")
        await client.post(f"/v1/tenants/{acme}/suspend")
        await client.post(f"/v1/tenants/{acme}/activate")

        response = await client.get("/v1/organizations", headers=as_header(acme))

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_lapsed_trial_is_forbidden_before_and_after_expiry_sweep(
        self, client, sessionmaker
    ):
        created = await client.post(
            "/v1/tenants", json={"name": "Trial", "domain": "trial", "trial_days": 7}
        )
        trial = created.json()["id"]

        running = await client.get("/v1/organizations", headers=as_header(trial))
        assert running.status_code == 200

        async with sessionmaker() as session, session.begin():
            await session.execute(
                update(TenantModel)
                .where(TenantModel.id == trial)
                .values(trial_ends_at=datetime.now(UTC) - timedelta(hours=1))
            )

        lapsed = await client.get("/v1/organizations", headers=as_header(trial))
        assert lapsed.status_code == 403
        assert lapsed.json()["detail"]["status"] == "expired"

        sweep = await client.post("/v1/tenants/trials/expire")
        assert sweep.json()["count"] == 1
        tenant = (await client.get(f"/v1/tenants/{trial}")).json()
        assert tenant["status"] == "expired"

        reactivated = await client.post(f"/v1/tenants/{trial}/activate")
        assert reactivated.status_code == 409
