"""Application tests for product media upload and removal."""

import pytest
from catalogue.product.media import RemoveProductMedia, upload_product_media
from catalogue.product.product import MAX_PHOTOS, Product
from catalogue.storage.port import StorageError
from protean import current_domain
from protean.exceptions import ValidationError

from shared.exceptions import NotAuthorized


class TestUploadProductMedia:
    def test_stores_file_and_attaches_url(self, make_product, storage):
        product = make_product()

        media_id = upload_product_media(product.id, "company-001", b"jpeg", "apples.jpg")

        product = current_domain.repository_for(Product).get(product.id)
        assert str(product.media[0].id) == media_id
        assert product.media[0].url in storage.objects
        assert product.media[0].url.startswith(f"https://cdn.test/products/{product.id}/")

    def test_rejected_upload_is_cleaned_up(self, make_product, storage):
        product = make_product()

        with pytest.raises(NotAuthorized):
            upload_product_media(product.id, "company-999", b"jpeg", "apples.jpg")

        assert storage.objects == {}
        assert [c["method"] for c in storage.calls] == ["store", "delete"]

    def test_limit_reached_is_cleaned_up(self, make_product, storage):
        product = make_product()
        for i in range(MAX_PHOTOS):
            upload_product_media(product.id, "company-001", b"jpeg", f"{i}.jpg")

        with pytest.raises(ValidationError):
            upload_product_media(product.id, "company-001", b"jpeg", "extra.jpg")

        assert len(storage.objects) == MAX_PHOTOS

    def test_storage_failure_leaves_product_untouched(self, make_product, storage):
        product = make_product()
        storage.fail_uploads = True

        with pytest.raises(StorageError):
            upload_product_media(product.id, "company-001", b"jpeg", "apples.jpg")

        assert len(current_domain.repository_for(Product).get(product.id).media) == 0


class TestRemoveProductMedia:
    def test_detaches_and_deletes_the_file(self, make_product, storage):
        product = make_product()
        media_id = upload_product_media(product.id, "company-001", b"jpeg", "apples.jpg")

        current_domain.process(
            RemoveProductMedia(product_id=product.id, company_id="company-001", media_id=media_id),
            asynchronous=False,
        )

        assert len(current_domain.repository_for(Product).get(product.id).media) == 0
        assert storage.objects == {}
