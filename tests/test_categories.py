import pytest

from modules.categories.exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    InvalidCategoryHierarchyError,
)
from modules.categories.models import CategoryModel
from modules.categories.services import CategoryService
from modules.search.models import SearchSyncOutboxModel
from shared.domain.exceptions import BusinessRuleViolationError

pytestmark = pytest.mark.django_db


@pytest.fixture
def service():
    return CategoryService()


def test_create_category_derives_slug(service):
    category = service.create_category(name='Smart Watches')
    assert category.slug == 'smart-watches'


def test_create_category_rejects_duplicate_slug(service, category):
    with pytest.raises(CategoryAlreadyExistsError):
        service.create_category(name='Phones')


def test_create_category_requires_existing_parent(service):
    with pytest.raises(CategoryNotFoundError):
        service.create_category(name='Orphan', parent_id=999)


def test_update_category_rejects_cycles(service, category):
    child = service.create_category(name='Android', parent_id=category.id)

    with pytest.raises(InvalidCategoryHierarchyError):
        service.update_category(category.id, parent_id=category.id)
    with pytest.raises(InvalidCategoryHierarchyError):
        service.update_category(category.id, parent_id=child.id)

    moved = service.update_category(child.id, parent_id=0)
    assert moved.parent is None


def test_tree_counts_active_products(service, category, make_product):
    child = service.create_category(name='Android', parent_id=category.id)
    make_product(category=child)
    make_product(category=child, status='inactive')

    tree = service.get_category_tree()

    assert [node['slug'] for node in tree] == ['phones']
    assert tree[0]['children'][0]['product_count'] == 1
    assert tree[0]['children'][0]['level'] == 1


def test_delete_category_with_active_products_is_blocked(service, category, make_product):
    make_product()

    with pytest.raises(BusinessRuleViolationError) as excinfo:
        service.delete_category(category.id)

    assert excinfo.value.rule == 'CATEGORY_HAS_ACTIVE_PRODUCTS'
    assert CategoryModel.objects.get(id=category.id).is_active


def test_delete_category_with_active_children_is_blocked(service, category):
    service.create_category(name='Android', parent_id=category.id)

    with pytest.raises(BusinessRuleViolationError) as excinfo:
        service.delete_category(category.id)

    assert excinfo.value.rule == 'CATEGORY_HAS_ACTIVE_CHILDREN'


def test_delete_category_soft_deletes(service, category):
    assert service.delete_category(category.id) is True
    assert CategoryModel.objects.get(id=category.id).is_active is False
    assert service.get_category_by_id(category.id) is None


def test_list_endpoint_envelope(api_client, category):
    response = api_client.get('/api/v1/categories/', {'search': 'pho'})

    assert response.status_code == 200
    body = response.json()
    assert body['status'] == 200
    assert body['data']['categories'][0]['slug'] == 'phones'
    assert body['data']['pagination']['total_records'] == 1


def test_create_requires_staff(api_client):
    response = api_client.post('/api/v1/categories/', {'name': 'Audio'}, format='json')
    assert response.status_code in (401, 403)


def test_delete_blocked_maps_to_422(admin_client, category, make_product):
    make_product()

    response = admin_client.delete(f'/api/v1/categories/{category.id}/')

    assert response.status_code == 422
    assert response.json()['rule'] == 'CATEGORY_HAS_ACTIVE_PRODUCTS'


def test_missing_category_maps_to_404(api_client):
    response = api_client.get('/api/v1/categories/999/')

    assert response.status_code == 404
    assert response.json()['code'] == 'CATEGORY_NOT_FOUND'


def test_category_products_endpoint(api_client, category, make_product):
    product = make_product()

    response = api_client.get('/api/v1/categories/phones/products/')

    assert response.status_code == 200
    data = response.json()['data']
    assert data['category']['slug'] == 'phones'
    assert [item['id'] for item in data['products']] == [product.id]


def test_rename_queues_reindex_of_active_products(service, category, make_product):
    active = make_product()
    make_product(status='inactive')

    service.update_category(category.id, name='Mobiles', slug='mobiles')

    queued = SearchSyncOutboxModel.objects.values_list('product_id', flat=True)
    assert list(queued) == [active.id]


def test_moving_category_without_rename_queues_nothing(service, category, make_product):
    make_product()
    parent = service.create_category(name='Electronics')

    service.update_category(category.id, name='Phones', parent_id=parent.id, sort_order=3)

    assert not SearchSyncOutboxModel.objects.exists()


def test_roots_endpoint_lists_top_level_categories(api_client, service, category, make_product):
    service.create_category(name='Android', parent_id=category.id)
    make_product()

    response = api_client.get('/api/v1/categories/roots/')

    assert response.status_code == 200
    roots = response.json()['data']
    assert [root['slug'] for root in roots] == ['phones']
    assert roots[0]['product_count'] == 1
