"""
FastAPI应用定义
包含所有API路由和中间件配置
"""

import time
import logging
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from fastapi import FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles

from ..models.api_models import (
    AddDayRequest, DocumentPayload, DocumentResponse, ImageSearchRequest, ImportDaysRequest, ImportTripInfoRequest,
    InterestRequest, MoveDayRequest, ParseRequest, PoiPayload, RateRequest, RenameTripRequest,
    RenumberRequest, ReorderRequest, ResearchSearchRequest, SavedTripsPayload, SaveTripRequest,
    SegmentPayload, SelectionsPayload, SettingsRequest, SuccessResponse,
)
from ..core import itinerary_editor as editor
from ..core.errors import ContentError, LLMResponseError
from .service import ContentService, SITE_HOME, SITE_INFO, SITE_ITINERARY
from ..config.config import Config
from .. import __version__

logger = logging.getLogger(__name__)

# 创建配置实例
config = Config()

# 创建FastAPI应用
app = FastAPI(
    title="旅行行程内容管理API服务",
    description="行程编辑、图片研究、景点研究和网站数据导出",
    version=__version__
)

# 添加CORS中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 站点图片（含上传图片）
app.mount("/images", StaticFiles(directory=str(config.site_images_dir), check_dir=False), name="images")


# 请求日志中间件
@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """记录每个请求的方法、路径、状态码和耗时；调试模式下记录请求体"""
    start_time = time.time()

    if config.debug_request_body:
        body = await request.body()
        content_type = request.headers.get("content-type", "")
        if body and content_type.startswith("application/json"):
            logger.info(f"🔍 [DEBUG] {request.method} {request.url.path} 请求体: {body.decode('utf-8', 'replace')[:2000]}")
        elif body:
            logger.info(f"🔍 [DEBUG] {request.method} {request.url.path} 请求体 {len(body)} 字节 ({content_type})")

        # 重新构造请求对象（因为body只能读一次）
        async def receive():
            return {"type": "http.request", "body": body}

        request._receive = receive

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"❌ {request.method} {request.url.path} 处理请求时异常: {type(e).__name__}: {e}")
        raise

    elapsed = (time.time() - start_time) * 1000
    logger.info(f"📨 {request.method} {request.url.path} -> {response.status_code} ({elapsed:.0f}ms)")
    return response


# 422验证错误处理器
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """422验证错误处理器 - 捕获数据验证失败"""
    logger.error(f"🚨 422 数据验证错误: {request.method} {request.url.path}")
    for error in exc.errors():
        logger.error(f"  🔸 {' -> '.join(str(loc) for loc in error['loc'])}: {error['msg']}")

    return JSONResponse(
        status_code=422,
        content={
            "error": "请求数据验证失败",
            "message": "数据格式不符合API要求",
            "details": jsonable_errors(exc),
        }
    )


def jsonable_errors(exc: RequestValidationError):
    """验证错误中的 ctx 可能包含异常对象，只保留可序列化字段"""
    return [
        {key: error[key] for key in ("loc", "msg", "type") if key in error}
        for error in exc.errors()
    ]


@app.exception_handler(ContentError)
async def content_error_handler(request: Request, exc: ContentError):
    """内容错误映射为对应的HTTP状态码"""
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc}")
    else:
        logger.warning(f"⚠️ {request.method} {request.url.path}: {exc}")

    content = {"error": exc.message}
    if isinstance(exc, LLMResponseError):
        content["raw"] = exc.raw
    return JSONResponse(status_code=exc.status_code, content=content)


# 初始化服务
content_service = ContentService(config)


@app.get("/")
async def root():
    """根路径"""
    return {
        "message": "旅行行程内容管理API服务",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """健康检查"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "llmConfigured": config.llm_configured,
    }


# ============================================
# 网站数据：行程 / 信息页 / 首页
# ============================================

@app.get("/api/itinerary", response_model=DocumentResponse)
async def get_itinerary():
    return {"data": content_service.load_site_document(SITE_ITINERARY)}


@app.post("/api/itinerary", response_model=SuccessResponse, response_model_exclude_none=True)
async def save_itinerary(payload: DocumentPayload):
    """保存网站行程，自动写入 metadata.version=2 和 lastModified"""
    content_service.save_site_document(SITE_ITINERARY, payload.data)
    return {"success": True}


@app.get("/api/info", response_model=DocumentResponse)
async def get_info():
    return {"data": content_service.load_site_document(SITE_INFO)}


@app.post("/api/info", response_model=SuccessResponse, response_model_exclude_none=True)
async def save_info(payload: DocumentPayload):
    content_service.save_site_document(SITE_INFO, payload.data)
    return {"success": True}


@app.get("/api/home", response_model=DocumentResponse)
async def get_home():
    return {"data": content_service.load_site_document(SITE_HOME)}


@app.post("/api/home", response_model=SuccessResponse, response_model_exclude_none=True)
async def save_home(payload: DocumentPayload):
    content_service.save_site_document(SITE_HOME, payload.data)
    return {"success": True}


@app.get("/api/site/itinerary")
async def get_site_itinerary():
    """网站格式的行程天数据"""
    return {"days": content_service.site_days()}


@app.get("/api/site/map", response_class=HTMLResponse)
async def get_route_map(lang: str = Query(default="en", pattern="^(en|cn)$")):
    return HTMLResponse(content_service.route_map_html(lang))


@app.get("/api/itinerary/pdf")
async def download_itinerary_pdf(lang: str = Query(default="en", pattern="^(en|cn)$")):
    pdf, filename = await content_service.itinerary_pdf(lang)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


# ============================================
# 图片搜索与上传
# ============================================

@app.post("/api/images/search")
async def search_images(request: ImageSearchRequest):
    images = await content_service.search_images(request.query, request.provider, request.count)
    return {"images": images}


@app.post("/api/images/upload")
async def upload_image(file: UploadFile = File(...)):
    content = await file.read()
    src = content_service.save_upload(file.filename, content)
    return {"src": src}


# ============================================
# 行程解析
# ============================================

@app.post("/api/parse")
async def parse_itinerary(request: ParseRequest):
    """大模型解析行程文本为带分段的天列表"""
    return {"days": await content_service.parse_with_llm(request.rawText)}


@app.post("/api/parse-trip-info")
async def parse_trip_info(request: ParseRequest):
    return {"tripInfo": await content_service.parse_trip_info(request.rawText)}


@app.post("/api/parse-text")
async def parse_text(request: ParseRequest):
    """规则解析，无需大模型"""
    return {"days": content_service.parse_text(request.rawText)}


# ============================================
# 内容管理行程（编辑操作）
# ============================================

@app.get("/api/content/itinerary")
async def get_content_itinerary():
    return {"data": content_service.load_content_itinerary()}


@app.post("/api/content/itinerary")
async def save_content_itinerary(payload: DocumentPayload):
    return {"data": content_service.save_content_itinerary(payload.data)}


@app.post("/api/content/import")
async def import_days(request: ImportDaysRequest):
    """导入解析结果，同一天数整体替换"""
    data = content_service.edit_content_itinerary(lambda it: editor.import_days(it, request.days))
    return {"data": data}


@app.post("/api/content/import-trip-info")
async def import_trip_info(request: ImportTripInfoRequest):
    trip_info = content_service.edit_content_itinerary(lambda it: editor.import_trip_info(it, request.tripInfo))
    return {"tripInfo": trip_info}


@app.get("/api/content/trip-info")
async def get_trip_info():
    return {"tripInfo": content_service.get_trip_info()}


@app.get("/api/content/settings")
async def get_settings():
    return {"settings": content_service.get_settings()}


@app.put("/api/content/settings")
async def update_settings(request: SettingsRequest):
    """更新行程设置，修改出发日期会重算每天的日期"""
    return {"settings": content_service.update_settings(request.model_dump(exclude_unset=True))}


@app.post("/api/content/days")
async def add_day(request: AddDayRequest):
    day = content_service.edit_content_itinerary(lambda it: editor.add_day(it, request.day, request.title))
    return {"day": day}


@app.patch("/api/content/days/{day}")
async def update_day(day: int, payload: DocumentPayload):
    if not payload.data:
        raise HTTPException(status_code=400, detail="Updates are required")
    updated = content_service.edit_content_itinerary(lambda it: editor.update_day(it, day, payload.data))
    return {"day": updated}


@app.delete("/api/content/days/{day}", response_model=SuccessResponse, response_model_exclude_none=True)
async def delete_day(day: int):
    content_service.edit_content_itinerary(lambda it: editor.delete_day(it, day))
    return {"success": True}


@app.post("/api/content/days/{day}/move")
async def move_day(day: int, request: MoveDayRequest):
    moved = content_service.edit_content_itinerary(lambda it: editor.move_day(it, day, request.to))
    return {"day": moved}


@app.post("/api/content/renumber")
async def renumber_days(request: RenumberRequest):
    data = content_service.edit_content_itinerary(lambda it: editor.renumber_days(it, request.startFrom))
    return {"data": data}


@app.post("/api/content/days/{day}/segments")
async def add_segment(day: int, payload: SegmentPayload):
    segment = content_service.edit_content_itinerary(lambda it: editor.add_segment(it, day, payload.segment))
    return {"segment": segment}


@app.patch("/api/content/days/{day}/segments/{segment_id}")
async def update_segment(day: int, segment_id: str, payload: SegmentPayload):
    segment = content_service.edit_content_itinerary(
        lambda it: editor.update_segment(it, day, segment_id, payload.segment)
    )
    return {"segment": segment}


@app.delete("/api/content/days/{day}/segments/{segment_id}", response_model=SuccessResponse,
            response_model_exclude_none=True)
async def delete_segment(day: int, segment_id: str):
    content_service.edit_content_itinerary(lambda it: editor.delete_segment(it, day, segment_id))
    return {"success": True}


@app.post("/api/content/days/{day}/segments/reorder")
async def reorder_segments(day: int, request: ReorderRequest):
    segments = content_service.edit_content_itinerary(lambda it: editor.reorder_segments(it, day, request.ids))
    return {"segments": segments}


# ============================================
# 图片研究结果与选择
# ============================================

@app.get("/api/research")
async def list_research():
    return {"days": content_service.research_days()}


@app.get("/api/research/{day}")
async def get_research(day: int):
    return {"research": content_service.load_research(day)}


@app.get("/api/selections/{day}")
async def get_selections(day: int):
    return {"selections": content_service.load_selections(day)}


@app.post("/api/selections/{day}", response_model=SuccessResponse)
async def save_selections(day: int, payload: SelectionsPayload):
    path = content_service.save_selections(day, payload.selections)
    return {"success": True, "path": str(path)}


@app.get("/api/export")
async def export_all_selections():
    """所有图片选择，转换为网站图片格式"""
    return {"days": content_service.export_days()}


# ============================================
# 景点研究
# ============================================

@app.get("/api/poi/{day}")
async def get_pois(day: int):
    return {"pois": content_service.load_pois(day)}


@app.post("/api/poi/{day}", response_model=SuccessResponse)
async def save_pois(day: int, payload: PoiPayload):
    path = content_service.save_pois(day, payload.pois)
    return {"success": True, "path": str(path)}


@app.post("/api/poi/research/{day}")
async def research_pois(day: int):
    research = await content_service.research_pois(day)
    return {"pois": research["pois"]}


# ============================================
# 已保存行程
# ============================================

@app.get("/api/saved-trips")
async def get_saved_trips():
    return {"trips": content_service.saved_trips()}


@app.post("/api/saved-trips", response_model=SuccessResponse, response_model_exclude_none=True)
async def save_saved_trips(payload: SavedTripsPayload):
    content_service.save_trips(payload.trips)
    return {"success": True}


@app.post("/api/saved-trips/save-as")
async def save_current_trip_as(request: SaveTripRequest):
    """把当前内容管理行程另存为新行程"""
    return {"trip": content_service.save_current_trip_as(request.name)}


@app.post("/api/saved-trips/{trip_id}/load")
async def load_saved_trip(trip_id: str):
    return {"data": content_service.load_saved_trip(trip_id)}


@app.put("/api/saved-trips/{trip_id}")
async def update_saved_trip(trip_id: str):
    """用当前行程覆盖已保存行程"""
    return {"trip": content_service.update_saved_trip(trip_id)}


@app.patch("/api/saved-trips/{trip_id}")
async def rename_saved_trip(trip_id: str, request: RenameTripRequest):
    return {"trip": content_service.rename_saved_trip(trip_id, request.name)}


@app.delete("/api/saved-trips/{trip_id}", response_model=SuccessResponse, response_model_exclude_none=True)
async def delete_saved_trip(trip_id: str):
    content_service.delete_saved_trip(trip_id)
    return {"success": True}


# ============================================
# 意向登记
# ============================================

@app.post("/api/interest")
async def submit_interest(request: InterestRequest):
    entry = content_service.record_interest(request.model_dump())
    return {"success": True, "submittedAt": entry["submittedAt"]}


# ============================================
# 图片研究代理
# ============================================

@app.get("/api/sessions")
async def get_sessions():
    return content_service.sessions.sessions()


@app.post("/api/search")
async def research_search(request: ResearchSearchRequest):
    """全部来源搜索，按相关度排序并记录搜索历史"""
    return await content_service.research_search(request.query, request.count)


@app.post("/api/rate")
async def rate_image(request: RateRequest):
    content_service.rate_image(request.query, request.imageId, request.rating)
    return {"success": True}


@app.get("/api/suggestions")
async def get_suggestions(query: Optional[str] = None):
    if not query:
        raise HTTPException(status_code=400, detail="Query is required")
    return {"suggestions": content_service.sessions.suggestions(query)}


@app.get("/api/stats")
async def get_stats():
    return content_service.sessions.stats()
