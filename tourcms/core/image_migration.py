"""
图片本地化
把网站数据和图片选择中的外链图片下载到站点图片目录，并改写为本地路径
"""

import os
import re
import time
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

logger = logging.getLogger(__name__)


USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
DOWNLOAD_TIMEOUT = 30


@dataclass
class MigrationReport:
    """迁移结果汇总"""
    success: int = 0
    failed: int = 0
    skipped: int = 0
    failures: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "failed": self.failed,
            "skipped": self.skipped,
            "failures": self.failures,
        }


def get_extension(url: str) -> str:
    """从URL推断图片扩展名，无法识别时默认 .jpg"""
    ext = os.path.splitext(url.split("?")[0])[1].lower()
    return ext if ext in IMAGE_EXTENSIONS else ".jpg"


def download_image(url: str, path: Union[str, Path], session: Optional[requests.Session] = None,
                   timeout: float = DOWNLOAD_TIMEOUT) -> Path:
    """
    下载图片到本地文件，自动跟随重定向

    Raises:
        requests.RequestException: 网络错误或非200响应
    """
    path = Path(path)
    http = session or requests
    response = http.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout,
                        stream=True, allow_redirects=True)
    try:
        response.raise_for_status()
        with open(path, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    f.write(chunk)
    except Exception:
        if path.exists():
            path.unlink()
        raise
    finally:
        response.close()
    return path


def _next_image_number(images_dir: Path, day: Any) -> int:
    pattern = re.compile(rf"^day-{re.escape(str(day))}-image-(\d+)")
    numbers = [int(m.group(1)) for m in (pattern.match(p.name) for p in images_dir.iterdir()) if m]
    return max(numbers, default=0) + 1


def migrate_site_images(days: List[Dict[str, Any]], images_dir: Union[str, Path],
                        session: Optional[requests.Session] = None,
                        delay: float = 0.5) -> MigrationReport:
    """
    下载网站天数据中的外链图片

    每张图片保存为 day-X-image-Y.ext（Y 为该天图片序号），
    成功后 src 改写为 /images/<文件名>。
    """
    images_dir = Path(images_dir)
    images_dir.mkdir(parents=True, exist_ok=True)
    report = MigrationReport()

    for day in days:
        for index, image in enumerate(day.get("images") or [], start=1):
            src = image.get("src") or ""
            if not src.startswith("http"):
                report.skipped += 1
                continue

            filename = f"day-{day.get('day')}-image-{index}{get_extension(src)}"
            logger.info(f"⬇️ 第 {day.get('day')} 天 图片 {index}: {filename}")
            try:
                download_image(src, images_dir / filename, session=session)
            except Exception as e:
                logger.warning(f"❌ 下载失败 {src[:60]}: {e}")
                report.failed += 1
                report.failures.append({"day": day.get("day"), "image": index, "url": src, "error": str(e)})
                continue

            image["src"] = f"/images/{filename}"
            report.success += 1
            if delay:
                time.sleep(delay)

    logger.info(f"📊 网站图片迁移：成功 {report.success}，失败 {report.failed}，跳过 {report.skipped}")
    return report


def migrate_selection_images(selection_docs: List[Dict[str, Any]], images_dir: Union[str, Path],
                             session: Optional[requests.Session] = None,
                             delay: float = 0.3) -> MigrationReport:
    """
    下载图片选择文档中的外链图片

    文件名取该天下一个可用的 day-X-image-N 序号；已是本地路径的图片跳过。
    成功迁移的文档会更新 lastModified。
    """
    images_dir = Path(images_dir)
    images_dir.mkdir(parents=True, exist_ok=True)
    report = MigrationReport()

    for doc in sorted(selection_docs, key=lambda d: d.get("day") or 0):
        day = doc.get("day")
        modified = False
        for segment_id, segment in (doc.get("segments") or {}).items():
            images = (segment or {}).get("images") or []
            for i, img in enumerate(images):
                url = img.get("url") or ""
                if not url.startswith("http"):
                    report.skipped += 1
                    continue

                number = _next_image_number(images_dir, day)
                filename = f"day-{day}-image-{number}{get_extension(url)}"
                local_path = f"/images/{filename}"
                try:
                    download_image(url, images_dir / filename, session=session)
                except Exception as e:
                    logger.warning(f"❌ 第 {day} 天 {segment_id} 图片 {i + 1} 下载失败: {e}")
                    report.failed += 1
                    report.failures.append({"day": day, "segment": segment_id, "url": url, "error": str(e)})
                    continue

                images[i] = {
                    **img,
                    "id": f"local-{int(time.time() * 1000)}-{number}",
                    "url": local_path,
                    "src": local_path,
                    "thumb": local_path,
                    "full": local_path,
                    "filename": filename,
                    "source": "local",
                    "photographer": img.get("photographer") or "Local Upload",
                }
                report.success += 1
                modified = True
                if delay:
                    time.sleep(delay)

        if modified:
            doc["lastModified"] = datetime.now().isoformat()

    logger.info(f"📊 选择图片迁移：成功 {report.success}，失败 {report.failed}，跳过 {report.skipped}")
    return report
