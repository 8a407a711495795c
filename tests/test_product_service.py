"""商品服务单元测试"""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from sqlalchemy import select

from app.core.exceptions import DuplicateKey, NotFound
from app.models.product import Product
from app.models.product_images import ProductImage
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.product_service import ProductService


class TestProductService:
    """商品服务测试类"""

    def test_init_service(self, db_session, storage):
        """测试服务初始化"""
        service = ProductService(db_session, storage)
        assert service.db == db_session
        assert service.storage == storage

    def test_create_product_assigns_id_and_timestamp(self, db_session, sample_product_data):
        """测试创建商品时生成 ID 和创建时间"""
        service = ProductService(db_session)
        product = service.create_product(ProductCreate(**sample_product_data))

        assert product.id
        assert product.created_at is not None
        assert product.sku == "MUG-1"
        assert db_session.get(Product, product.id) is not None

    def test_create_product_ids_are_unique(self, db_session, sample_product_data):
        service = ProductService(db_session)
        first = service.create_product(ProductCreate(**sample_product_data))
        second = service.create_product(ProductCreate(**{**sample_product_data, "sku": "MUG-2"}))
        assert first.id != second.id

    def test_create_duplicate_sku(self, db_session, sample_product_data):
        """测试 SKU 重复，其他字段不同也应拒绝"""
        service = ProductService(db_session)
        service.create_product(ProductCreate(**sample_product_data))

        with pytest.raises(DuplicateKey) as exc_info:
            service.create_product(ProductCreate(
                name="Other",
                description="Completely different",
                price=99.0,
                sku="MUG-1",
            ))

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "SKU already exists"
        # 会话回滚后仍可继续使用
        assert len(service.list_products()) == 1

    def test_list_products_newest_first(self, db_session, make_product):
        """测试商品列表按创建时间倒序"""
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        make_product(sku="OLD", created_at=base)
        make_product(sku="NEW", created_at=base + timedelta(hours=2))
        make_product(sku="MID", created_at=base + timedelta(hours=1))

        service = ProductService(db_session)
        skus = [p.sku for p in service.list_products()]

        assert skus == ["NEW", "MID", "OLD"]

    def test_list_products_empty(self, db_session):
        assert ProductService(db_session).list_products() == []

    def test_update_product(self, db_session, make_product):
        """测试更新商品，ID 与创建时间不变"""
        product = make_product(sku="A-1")
        original_id = product.id
        original_created_at = product.created_at

        service = ProductService(db_session)
        updated = service.update_product(product.id, ProductUpdate(
            name="Renamed",
            description="New description",
            price=42.0,
            sku="A-2",
        ))

        assert updated.id == original_id
        assert updated.created_at == original_created_at
        assert updated.name == "Renamed"
        assert updated.price == 42.0
        assert updated.sku == "A-2"

    def test_update_keeps_own_sku(self, db_session, make_product):
        """测试保留自身 SKU 不算冲突"""
        product = make_product(sku="SAME")
        service = ProductService(db_session)
        updated = service.update_product(product.id, ProductUpdate(
            name="x", description="y", price=1.0, sku="SAME"
        ))
        assert updated.sku == "SAME"

    def test_update_duplicate_sku(self, db_session, make_product):
        make_product(sku="TAKEN")
        product = make_product(sku="MINE")

        service = ProductService(db_session)
        with pytest.raises(DuplicateKey):
            service.update_product(product.id, ProductUpdate(
                name="x", description="y", price=1.0, sku="TAKEN"
            ))

        db_session.expire_all()
        assert db_session.get(Product, product.id).sku == "MINE"

    def test_update_not_found(self, db_session):
        service = ProductService(db_session)
        with pytest.raises(NotFound) as exc_info:
            service.update_product("missing", ProductUpdate(
                name="x", description="y", price=1.0, sku="Z"
            ))
        assert exc_info.value.status_code == 404

    def test_delete_product_cascades_images_and_files(self, db_session, storage, make_product):
        """测试删除商品时级联删除图片记录和本地文件"""
        product = make_product()
        local_url = storage.save("local.jpg", b"data")
        db_session.add_all([
            ProductImage(product_id=product.id, url=local_url, position=0),
            ProductImage(product_id=product.id, url="https://cdn.example.com/remote.jpg", position=1),
        ])
        db_session.commit()

        service = ProductService(db_session, storage)
        service.delete_product(product.id)

        assert db_session.get(Product, product.id) is None
        remaining = db_session.execute(
            select(ProductImage).where(ProductImage.product_id == product.id)
        ).scalars().all()
        assert remaining == []
        assert storage.list_files() == []

    def test_delete_product_file_errors_are_swallowed(self, db_session, make_product):
        """测试文件删除失败不影响记录删除"""
        product = make_product()
        db_session.add(ProductImage(product_id=product.id, url="/uploads/products/gone.jpg", position=0))
        db_session.commit()

        storage_mock = Mock()
        storage_mock.remove.return_value = False

        service = ProductService(db_session, storage_mock)
        service.delete_product(product.id)

        assert db_session.get(Product, product.id) is None
        storage_mock.remove.assert_called_once_with("/uploads/products/gone.jpg")

    def test_delete_product_leaves_other_products(self, db_session, storage, make_product):
        keep = make_product(sku="KEEP")
        drop = make_product(sku="DROP")
        keep_url = storage.save("keep.png", b"k")
        db_session.add(ProductImage(product_id=keep.id, url=keep_url, position=0))
        db_session.commit()

        ProductService(db_session, storage).delete_product(drop.id)

        assert db_session.get(Product, keep.id) is not None
        assert storage.list_files() == ["keep.png"]

    def test_delete_product_not_found(self, db_session):
        with pytest.raises(NotFound):
            ProductService(db_session).delete_product("missing")
