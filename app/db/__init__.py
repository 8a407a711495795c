import os

from .base import Base
from .session import engine


def init_db():
    """建表（已存在的表不会重建）"""
    # 导入模型以注册到 Base.metadata
    from app import models  # noqa: F401

    if engine.url.get_backend_name() == "sqlite":
        database = engine.url.database
        if database and database != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(database)), exist_ok=True)

    Base.metadata.create_all(bind=engine)


# Export for convenience
__all__ = ["Base", "engine", "init_db"]
