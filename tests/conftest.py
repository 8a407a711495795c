"""测试配置和 fixtures"""
import os
import shutil
import tempfile

# 必须在导入 app 之前设置，避免连接真实数据库/写入项目目录
_UPLOADS_TMP = tempfile.mkdtemp(prefix="catalog-uploads-")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOADS_ROOT", _UPLOADS_TMP)

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  注册模型
from app.db.base import Base
from app.db.session import enable_sqlite_foreign_keys
from app.core.dependencies import get_db, get_image_storage
from app.main import app
from app.models.product import Product
from app.services.storage import LocalImageStorage


@pytest.fixture(scope="session", autouse=True)
def cleanup_uploads_tmp():
    """测试结束后删除导入时创建的上传目录"""
    yield
    shutil.rmtree(_UPLOADS_TMP, ignore_errors=True)


@pytest.fixture
def db_engine():
    """内存 SQLite 引擎（开启外键）"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)

    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    """创建数据库会话"""
    db = session_factory()

    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def storage(tmp_path):
    """临时目录中的图片存储"""
    image_storage = LocalImageStorage(str(tmp_path / "uploads"), "/uploads")
    image_storage.ensure_directory()
    return image_storage


@pytest.fixture
def client(db_session, storage):
    """创建测试客户端（替换数据库和存储依赖）"""
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_image_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_product_data():
    """示例商品数据"""
    return {
        "name": "Mug",
        "description": "Ceramic mug",
        "price": 19.9,
        "sku": "MUG-1"
    }


@pytest.fixture
def make_product(db_session):
    """直接写库创建商品，可指定创建时间"""
    counter = {"n": 0}

    def _make(sku=None, created_at=None, **fields):
        counter["n"] += 1
        product = Product(
            name=fields.get("name", f"Product {counter['n']}"),
            description=fields.get("description", "Test product"),
            price=fields.get("price", 9.5),
            sku=sku or f"SKU-{counter['n']}",
            created_at=created_at or datetime.now(timezone.utc) + timedelta(seconds=counter["n"]),
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture
def image_bytes():
    """生成伪造的图片内容（服务只校验声明的类型）"""

    def _bytes(size: int = 128) -> bytes:
        return b"\xff\xd8\xff\xe0" + b"0" * max(size - 4, 0)

    return _bytes
