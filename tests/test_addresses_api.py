ADDRESS = {
    "street": "Rua Goiás",
    "number": "100",
    "district": "Centro",
    "city": "Uberlândia",
    "state": "MG",
    "zipCode": "38400000",
}


async def test_address_lifecycle(client, customer, customer_headers):
    assert (await client.get("/addresses/me", headers=customer_headers)).status_code == 404

    response = await client.post("/addresses", json=ADDRESS, headers=customer_headers)
    assert response.status_code == 201
    assert response.json()["userId"] == customer.id

    response = await client.put(
        "/addresses", json={**ADDRESS, "number": "200"}, headers=customer_headers
    )
    assert response.status_code == 200
    assert response.json()["number"] == "200"

    response = await client.get("/addresses/me", headers=customer_headers)
    assert response.json()["number"] == "200"

    assert (await client.delete("/addresses", headers=customer_headers)).status_code == 200
    assert (await client.get("/addresses/me", headers=customer_headers)).status_code == 404


async def test_second_address_is_rejected(client, customer_headers):
    await client.post("/addresses", json=ADDRESS, headers=customer_headers)

    response = await client.post("/addresses", json=ADDRESS, headers=customer_headers)

    assert response.status_code == 400


async def test_addresses_are_private(client, customer_headers, other_customer_headers):
    await client.post("/addresses", json=ADDRESS, headers=customer_headers)

    assert (await client.get("/addresses/me", headers=other_customer_headers)).status_code == 404
    assert (await client.delete("/addresses", headers=other_customer_headers)).status_code == 404


async def test_invalid_zip_code_and_state(client, customer_headers):
    response = await client.post(
        "/addresses", json={**ADDRESS, "zipCode": "123"}, headers=customer_headers
    )
    assert response.status_code == 400

    response = await client.post(
        "/addresses", json={**ADDRESS, "state": "M1"}, headers=customer_headers
    )
    assert response.status_code == 400
