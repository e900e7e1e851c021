import pytest
from catalog.services import CategoryTreeError, validate_category_parent
from catalog.tests.factories import CategoryFactory
from django.core.exceptions import ValidationError


@pytest.mark.django_db
def test_root_and_child_are_valid():
    root = CategoryFactory()
    child = CategoryFactory(parent=root)
    validate_category_parent(category=child, parent=root)
    validate_category_parent(category=root, parent=None)


@pytest.mark.django_db
def test_category_cannot_be_its_own_parent():
    category = CategoryFactory()
    with pytest.raises(CategoryTreeError):
        validate_category_parent(category=category, parent=category)


@pytest.mark.django_db
def test_cycles_are_rejected():
    a = CategoryFactory()
    b = CategoryFactory(parent=a)
    c = CategoryFactory(parent=b)

    with pytest.raises(CategoryTreeError, match="cycles"):
        validate_category_parent(category=a, parent=c)


@pytest.mark.django_db
def test_depth_limit(settings):
    settings.CATEGORY_MAX_DEPTH = 3
    a = CategoryFactory()
    b = CategoryFactory(parent=a)
    c = CategoryFactory(parent=b)
    new = CategoryFactory()

    validate_category_parent(category=new, parent=b)
    with pytest.raises(CategoryTreeError, match="deeper than 3"):
        validate_category_parent(category=new, parent=c)


@pytest.mark.django_db
def test_model_clean_reports_parent_error():
    a = CategoryFactory()
    b = CategoryFactory(parent=a)
    a.parent = b

    with pytest.raises(ValidationError) as excinfo:
        a.full_clean()
    assert "parent" in excinfo.value.message_dict
