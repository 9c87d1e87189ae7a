"""
Service context for log lines.

Identifies which process emitted a line when several API workers share one sink.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'park-ticketing')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    return f'{service_name}@{deploy_env}:{socket.gethostname()}:{os.getpid()}'
