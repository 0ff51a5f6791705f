"""
旅行内容管理API服务主入口
行程编辑、图片研究、景点研究和网站数据导出
"""

import os
import multiprocessing

import uvicorn
from dotenv import load_dotenv

from tourcms.config.config import Config

# 检查 .env 文件是否存在
if os.path.exists(".env"):
    load_dotenv(".env")

# 初始化配置
config = Config()

from tourcms.api.app import app

if __name__ == "__main__":
    # 研究任务多为外部请求，默认两个工作进程
    workers = int(os.environ.get("WORKERS", min(multiprocessing.cpu_count(), 2)))
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        workers=workers,
        log_level=config.log_level.lower(),
        access_log=True,
        reload=False
    )
