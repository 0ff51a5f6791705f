"""
API数据模型
定义API请求和响应的数据结构
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class DocumentPayload(BaseModel):
    """整份JSON文档的保存请求"""
    data: Optional[Dict[str, Any]] = Field(default=None, description="文档内容")


class DocumentResponse(BaseModel):
    """文档读取响应，文件不存在时为 null"""
    data: Optional[Dict[str, Any]] = Field(default=None, description="文档内容")


class SuccessResponse(BaseModel):
    """通用成功响应"""
    success: bool = Field(default=True, description="是否成功")
    path: Optional[str] = Field(default=None, description="写入的文件路径")


class ImageSearchRequest(BaseModel):
    """CMS 图片搜索请求"""
    query: Optional[str] = Field(default=None, description="搜索词")
    provider: str = Field(default="all", description="all / both / unsplash / pexels / pixabay / wikimedia")
    count: int = Field(default=15, ge=1, le=100, description="期望的图片总数")


class ResearchSearchRequest(BaseModel):
    """图片研究搜索请求"""
    query: Optional[str] = Field(default=None, description="搜索词")
    count: int = Field(default=30, ge=1, le=200, description="期望的图片总数")


class RateRequest(BaseModel):
    """图片评分请求"""
    query: Optional[str] = Field(default=None, description="搜索词")
    imageId: Optional[str] = Field(default=None, description="图片ID，如 unsplash-abc123")
    rating: Optional[str] = Field(default=None, description="veryRelevant / relevant / notRelevant")


class ParseRequest(BaseModel):
    """行程文本解析请求"""
    rawText: Optional[str] = Field(default=None, description="原始行程文本")


class SelectionsPayload(BaseModel):
    """某天的图片选择"""
    selections: Optional[Dict[str, Any]] = Field(default=None, description="按片段ID组织的已选图片")


class PoiPayload(BaseModel):
    """某天的景点审阅结果"""
    pois: Optional[List[Dict[str, Any]]] = Field(default=None, description="景点列表")


class SavedTripsPayload(BaseModel):
    """已保存行程列表"""
    trips: Optional[List[Dict[str, Any]]] = Field(default=None, description="完整的行程列表")


class SaveTripRequest(BaseModel):
    """把当前行程另存为新行程"""
    name: str = Field(min_length=1, description="行程名称")


class RenameTripRequest(BaseModel):
    """重命名已保存行程"""
    name: str = Field(min_length=1, description="新名称")


class ImportDaysRequest(BaseModel):
    """导入解析后的天数据"""
    days: List[Dict[str, Any]] = Field(description="解析器输出的天列表")


class ImportTripInfoRequest(BaseModel):
    """导入解析后的行程概要"""
    tripInfo: Dict[str, Any] = Field(description="解析器输出的行程概要")


class AddDayRequest(BaseModel):
    """新增一天"""
    day: int = Field(ge=0, description="天数")
    title: str = Field(default="", description="标题")


class MoveDayRequest(BaseModel):
    """修改某天的天数"""
    to: int = Field(ge=0, description="目标天数")


class RenumberRequest(BaseModel):
    """重新连续编号"""
    startFrom: int = Field(default=1, ge=0, description="起始天数")


class SettingsRequest(BaseModel):
    """行程设置，允许附加字段"""
    model_config = ConfigDict(extra="allow")

    startDate: Optional[str] = Field(default=None, description="出发日期（第0天），ISO 格式如 2026-05-08")


class SegmentPayload(BaseModel):
    """片段字段（新增或部分更新）"""
    segment: Dict[str, Any] = Field(default_factory=dict, description="片段字段")


class ReorderRequest(BaseModel):
    """片段重排"""
    ids: List[str] = Field(description="片段ID的新顺序")


class InterestRequest(BaseModel):
    """意向登记表单"""
    name: str = Field(min_length=1, description="姓名")
    mobile: str = Field(min_length=1, description="手机号")
    email: str = Field(min_length=3, description="邮箱")
    message: str = Field(default="", description="留言")
