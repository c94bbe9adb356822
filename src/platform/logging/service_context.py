"""
Service context extraction for log lines.

Every log line is prefixed with `<service>@<env>:<instance>` so that lines from
several API replicas can be told apart once shipped to the log collector.
"""

from functools import lru_cache
import os


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'event-commerce')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostname in k8s/ECS, PID for local development
    instance = os.getenv('HOSTNAME') or str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance[:12]}'
