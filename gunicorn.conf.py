# Gunicorn 生产环境配置
import multiprocessing
import os

# 服务器套接字
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"
backlog = 512

# 工作进程配置
workers = int(os.environ.get("WORKERS", min(multiprocessing.cpu_count(), 2)))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 500
max_requests_jitter = 50

# 景点研究和PDF生成可能较慢
timeout = 300
keepalive = 5

# 日志配置
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()

# 进程名称
proc_name = "tour-cms"

preload_app = False
reload = False

# 请求限制
limit_request_line = 4096
limit_request_fields = 100
