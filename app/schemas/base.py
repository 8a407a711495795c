from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional


class BaseSchema(BaseModel):
    """ORM 响应模型基类（字段对外使用 camelCase）"""

    model_config = ConfigDict(
        from_attributes=True,  # 支持从 ORM 对象直接生成 Schema
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BaseResponse(BaseModel):
    """基础响应模型"""
    success: bool = Field(
        ...,
        description="请求是否成功"
    )
    message: Optional[str] = Field(
        None,
        description="响应消息"
    )

