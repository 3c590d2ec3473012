from fastapi import status

from app.api.seo.models import SEOTemplate


def store_payload(**kwargs):
    payload = {
        'name': 'Acme Outdoors',
        'image': 'https://cdn.example.com/acme.png',
        'direct_url': 'https://acme.example.com',
    }
    payload.update(kwargs)
    return payload


def test_create_store_with_default_seo(client, admin_headers):
    response = client.post('/stores', json=store_payload(), headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['slug'] == 'acme-outdoors'
    assert data['meta_title'] == 'Acme Outdoors - Your Store'
    assert data['meta_description'] == 'Buy Acme Outdoors products online'
    assert data['focus_keywords'] == ['acme outdoors']
    assert data['categories'] == []


def test_create_store_from_seo_template(client, admin_headers, db_session):
    template = SEOTemplate(
        meta_title='Save d_c at {{storeName}}',
        meta_description='The best s_n coupon codes and deals',
        slug='{{storeName}}-coupons',
        template_type='stores',
    )
    template.meta_keywords = ['{{storeName}} coupons', 'discounts']
    db_session.add(template)
    db_session.commit()

    response = client.post('/stores', json=store_payload(), headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['meta_title'] == 'Save d_c at Acme Outdoors'
    assert data['meta_description'] == 'The best Acme Outdoors coupon codes and deals'
    assert data['meta_keywords'] == ['Acme Outdoors coupons', 'discounts']
    assert data['slug'] == 'acme-outdoors-coupons'


def test_create_store_keeps_explicit_seo(client, admin_headers):
    response = client.post(
        '/stores',
        json=store_payload(slug='Acme Deals', meta_title='Acme promo codes'),
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['slug'] == 'acme-deals'
    assert data['meta_title'] == 'Acme promo codes'


def test_create_store_duplicate_slug(client, admin_headers):
    client.post('/stores', json=store_payload(), headers=admin_headers)
    response = client.post(
        '/stores', json=store_payload(name='Acme Outdoors'), headers=admin_headers
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_create_store_requires_image(client, admin_headers):
    payload = store_payload()
    del payload['image']
    response = client.post('/stores', json=payload, headers=admin_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert 'image' in response.json()['detail']


def test_store_categories(client, admin_headers, create_test_category):
    fashion = create_test_category('Fashion')
    travel = create_test_category('Travel')
    response = client.post(
        '/stores',
        json=store_payload(categories=[fashion.id, travel.id]),
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    store_id = response.json()['id']
    assert sorted(response.json()['categories']) == sorted([fashion.id, travel.id])

    response = client.put(
        f'/stores/{store_id}',
        json={'categories': [travel.id]},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()['categories'] == [travel.id]

    response = client.get(
        '/stores/by-categories', params={'category_ids': [fashion.id]}
    )
    assert response.json() == []
    response = client.get(
        '/stores/by-categories', params={'category_ids': [travel.id]}
    )
    assert [s['id'] for s in response.json()] == [store_id]


def test_rename_store_refreshes_seo(client, admin_headers):
    response = client.post('/stores', json=store_payload(), headers=admin_headers)
    store_id = response.json()['id']

    response = client.put(
        f'/stores/{store_id}', json={'name': 'Bolt Bikes'}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['name'] == 'Bolt Bikes'
    assert data['slug'] == 'bolt-bikes'
    assert data['meta_title'] == 'Bolt Bikes - Your Store'


def test_update_nonexistent_store(client, admin_headers):
    response = client.put('/stores/999', json={'name': 'Nobody'}, headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()['detail'] == 'Store not found'


def test_coupon_discount_updates_meta_title(
    client, admin_headers, db_session, test_store, coupon_payload
):
    client.post('/coupons', json=coupon_payload, headers=admin_headers)
    coupon_payload['title'] = 'Take 35% off boots'
    client.post('/coupons', json=coupon_payload, headers=admin_headers)

    db_session.refresh(test_store)
    assert test_store.meta_title == 'Acme Coupons - 35% Off'


def test_store_affiliate_url_from_network(
    client, admin_headers, test_network, create_test_store, coupon_payload
):
    store = create_test_store('Networked', network_id=test_network.id)
    coupon_payload['store_id'] = store.id
    response = client.post('/coupons', json=coupon_payload, headers=admin_headers)
    assert response.json()['coupon_url'] == test_network.store_network_url


def test_get_store_by_slug_with_coupons(client, test_store, create_test_coupon):
    second = create_test_coupon(test_store.id, position=2)
    first = create_test_coupon(test_store.id, position=1)

    response = client.get(f'/stores/slug/{test_store.slug}')
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['id'] == test_store.id
    assert [c['id'] for c in data['coupons']] == [first.id, second.id]
    assert data['coupons'][0]['store']['name'] == test_store.name


def test_get_store_by_slug_not_found(client):
    response = client.get('/stores/slug/missing')
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_store_lists(client, db_session, create_test_store, test_network):
    active = create_test_store('Active', is_popular=True, network_id=test_network.id)
    create_test_store('Hidden', is_active=False, is_popular=True)

    response = client.get('/stores/active')
    assert [s['id'] for s in response.json()] == [active.id]
    response = client.get('/stores/popular')
    assert [s['id'] for s in response.json()] == [active.id]
    response = client.get(f'/stores/network/{test_network.id}')
    assert [s['id'] for s in response.json()] == [active.id]
    response = client.get('/stores/recent', params={'limit': 1})
    assert len(response.json()) == 1


def test_store_coupon_count(client, test_store, create_test_coupon):
    create_test_coupon(test_store.id)
    create_test_coupon(test_store.id, coupon_type='deal')

    response = client.get(f'/stores/{test_store.id}/coupon-count')
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {'store_id': test_store.id, 'total': 2}
