from httpx import AsyncClient
from sqlalchemy import func, select

from app.db.models.brand import Brand
from app.db.models.brand_member import BrandMember
from app.db.models.place import Place


async def _add(client: AsyncClient, brand_id: str, actor: dict, user_id: str, role: str = "member"):
    return await client.post(f"/brands/{brand_id}/members", json={"userId": user_id, "role": role}, headers=actor)


async def test_create_brand_makes_creator_owner(client: AsyncClient, auth) -> None:
    resp = await client.post("/brands", json={"name": "Acme", "description": "Shoes"}, headers=auth("user_u"))
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Acme"
    assert data["ownerId"] == "user_u"
    assert data["role"] == "owner"

    members = (await client.get(f"/brands/{data['id']}/members", headers=auth("user_u"))).json()
    assert [(m["userId"], m["role"]) for m in members] == [("user_u", "owner")]
    assert members[0]["acceptedAt"] is not None


async def test_create_brand_validation(client: AsyncClient, auth) -> None:
    assert (await client.post("/brands", json={"name": ""}, headers=auth("user_u"))).status_code == 400
    blank = await client.post("/brands", json={"name": "   "}, headers=auth("user_u"))
    assert blank.status_code == 400
    assert "name" in blank.json()["detail"]["fieldErrors"]
    assert (await client.post("/brands", json={"name": "x" * 101}, headers=auth("user_u"))).status_code == 400
    assert (await client.post("/brands", json={"name": "Acme"})).status_code == 401


async def test_list_brands_with_role(client: AsyncClient, auth, brand) -> None:
    other = (await client.post("/brands", json={"name": "Other"}, headers=auth("user_v"))).json()
    await _add(client, other["id"], auth("user_v"), "user_u", "admin")

    resp = await client.get("/brands", headers=auth("user_u"))
    roles = {b["name"]: b["role"] for b in resp.json()}
    assert roles == {"Acme": "owner", "Other": "admin"}


async def test_member_role_gates_adding_members(client: AsyncClient, auth, brand) -> None:
    bid = brand["id"]
    u, v = auth("user_u"), auth("user_v")

    assert (await _add(client, bid, u, "user_v")).status_code == 201

    refused = await _add(client, bid, v, "user_w")
    assert refused.status_code == 403

    promoted = await client.put(f"/brands/{bid}/members/user_v", json={"role": "admin"}, headers=u)
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "admin"

    added = await _add(client, bid, v, "user_w")
    assert added.status_code == 201
    assert added.json()["invitedBy"] == "user_v"
    assert added.json()["role"] == "member"


async def test_add_existing_member_conflicts(client: AsyncClient, auth, brand) -> None:
    bid = brand["id"]
    await _add(client, bid, auth("user_u"), "user_v")
    assert (await _add(client, bid, auth("user_u"), "user_v")).status_code == 409
    assert (await _add(client, bid, auth("user_u"), "user_x", role="boss")).status_code == 400


async def test_last_owner_cannot_be_demoted_or_removed(client: AsyncClient, auth, brand) -> None:
    bid = brand["id"]
    u = auth("user_u")

    demote = await client.put(f"/brands/{bid}/members/user_u", json={"role": "admin"}, headers=u)
    assert demote.status_code == 400
    assert demote.json()["detail"] == "Cannot remove the last owner of the brand"

    remove = await client.delete(f"/brands/{bid}/members/user_u", headers=u)
    assert remove.status_code == 400

    assert (await _add(client, bid, u, "user_o", "owner")).status_code == 201
    assert (await client.delete(f"/brands/{bid}/members/user_u", headers=u)).status_code == 200

    members = (await client.get(f"/brands/{bid}/members", headers=auth("user_o"))).json()
    assert [(m["userId"], m["role"]) for m in members] == [("user_o", "owner")]


async def test_self_removal_needs_no_admin(client: AsyncClient, auth, brand) -> None:
    bid = brand["id"]
    await _add(client, bid, auth("user_u"), "user_v")
    await _add(client, bid, auth("user_u"), "user_w")

    assert (await client.delete(f"/brands/{bid}/members/user_w", headers=auth("user_v"))).status_code == 403
    assert (await client.delete(f"/brands/{bid}/members/user_v", headers=auth("user_v"))).status_code == 200
    assert (await client.get(f"/brands/{bid}", headers=auth("user_v"))).status_code == 403


async def test_update_or_remove_unknown_member_is_404(client: AsyncClient, auth, brand) -> None:
    bid = brand["id"]
    u = auth("user_u")
    assert (await client.put(f"/brands/{bid}/members/ghost", json={"role": "admin"}, headers=u)).status_code == 404
    assert (await client.delete(f"/brands/{bid}/members/ghost", headers=u)).status_code == 404


async def test_non_member_is_forbidden(client: AsyncClient, auth, brand) -> None:
    bid = brand["id"]
    x = auth("user_x")
    assert (await client.get(f"/brands/{bid}", headers=x)).status_code == 403
    assert (await client.get(f"/brands/{bid}/members", headers=x)).status_code == 403
    assert (await client.get("/brands/brd_missing", headers=x)).status_code == 403


async def test_update_brand_requires_admin(client: AsyncClient, auth, brand) -> None:
    bid = brand["id"]
    await _add(client, bid, auth("user_u"), "user_v")

    assert (await client.put(f"/brands/{bid}", json={"name": "Nope"}, headers=auth("user_v"))).status_code == 403

    resp = await client.put(f"/brands/{bid}", json={"description": "Now with a description"}, headers=auth("user_u"))
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Acme"
    assert data["description"] == "Now with a description"
    assert data["role"] == "owner"

    got = (await client.get(f"/brands/{bid}", headers=auth("user_v"))).json()
    assert got["description"] == "Now with a description"
    assert got["role"] == "member"


async def test_delete_brand_cascades(client: AsyncClient, auth, brand, session_factory) -> None:
    bid = brand["id"]
    u = auth("user_u")
    await _add(client, bid, u, "user_a", "admin")
    await client.post(f"/brands/{bid}/places", json={"name": "HQ", "lat": 1, "lng": 1}, headers=u)
    await client.post("/places", json={"name": "Mine", "lat": 1, "lng": 1}, headers=u)

    assert (await client.delete(f"/brands/{bid}", headers=auth("user_a"))).status_code == 403

    resp = await client.delete(f"/brands/{bid}", headers=u)
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    async with session_factory() as s:
        assert await s.get(Brand, bid) is None
        members = (await s.execute(
            select(func.count()).select_from(BrandMember).where(BrandMember.brand_id == bid)
        )).scalar_one()
        places = (await s.execute(select(Place))).scalars().all()
    assert members == 0
    assert [p.name for p in places] == ["Mine"]


async def test_brand_places_are_scoped_to_brand(client: AsyncClient, auth, brand) -> None:
    bid = brand["id"]
    await _add(client, bid, auth("user_u"), "user_v")

    created = await client.post(f"/brands/{bid}/places", json={"name": "Store 1", "lat": 0, "lng": 0.01},
                                headers=auth("user_v"))
    assert created.status_code == 201
    assert created.json()["brandId"] == bid
    assert created.json()["ownerId"] is None

    # sin chequeo de duplicados dentro de una brand
    dup = await client.post(f"/brands/{bid}/places", json={"name": "Store 1b", "lat": 0, "lng": 0.01},
                            headers=auth("user_u"))
    assert dup.status_code == 201

    # un place personal en el mismo punto no aparece en la brand
    await client.post("/places", json={"name": "Personal", "lat": 0, "lng": 0.005}, headers=auth("user_u"))

    resp = await client.get(f"/brands/{bid}/places/near", params={"lat": 0, "lng": 0}, headers=auth("user_v"))
    assert resp.status_code == 200
    assert {p["name"] for p in resp.json()} == {"Store 1", "Store 1b"}
    assert all(p["distanceMeters"] > 1000 for p in resp.json())


async def test_brand_places_require_membership(client: AsyncClient, auth, brand) -> None:
    bid = brand["id"]
    x = auth("user_x")
    assert (await client.get(f"/brands/{bid}/places/near", params={"lat": 0, "lng": 0}, headers=x)).status_code == 403
    assert (await client.post(f"/brands/{bid}/places", json={"name": "s", "lat": 0, "lng": 0}, headers=x)).status_code == 403
    bad = await client.get(f"/brands/{bid}/places/near", params={"lat": 0}, headers=auth("user_u"))
    assert bad.status_code == 400


async def test_update_brand_rejects_blank_name(client: AsyncClient, auth, brand) -> None:
    resp = await client.put(f"/brands/{brand['id']}", json={"name": "   "}, headers=auth("user_u"))
    assert resp.status_code == 400
    assert "name" in resp.json()["detail"]["fieldErrors"]

    renamed = await client.put(f"/brands/{brand['id']}", json={"name": "  Acme Two "}, headers=auth("user_u"))
    assert renamed.json()["name"] == "Acme Two"
